from __future__ import annotations
import io
import logging
import pandas as pd

from csvchat.models.schemas import Table
from csvchat.services.errors import ParseError

logger = logging.getLogger("upload")


def parse_csv(content: bytes, encoding: str = "utf-8") -> Table:
    """
    Parse raw CSV bytes into rows of string cells.
    The first row is kept as data (no header inference); an empty file yields [].
    NUL bytes are dropped first: the C tokenizer would otherwise cut the
    field short and hide the rest of the cell from validation.
    """
    content = (content or b"").replace(b"\x00", b"")
    if not content or not content.strip():
        return []
    try:
        df = pd.read_csv(
            io.BytesIO(content),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, UnicodeDecodeError) as ex:
        logger.info("csv parse failed: %s", type(ex).__name__)
        raise ParseError(str(ex).strip()) from ex
    return df.fillna("").astype(str).values.tolist()
