from __future__ import annotations
import logging
import time

from csvchat.models.schemas import UploadAccepted

logger = logging.getLogger("assistant")

GREETING_REPLY = (
    "I'm an AI assistant ready to help you analyze your data. "
    "Please upload a CSV file or ask me a question about your data."
)


def format_upload_message(accepted: UploadAccepted, rows: int = 3) -> str:
    lines = "\n".join(", ".join(row) for row in accepted.preview[:rows])
    return f"Uploaded CSV file: {accepted.file_name} ({accepted.size_bytes} bytes)\n\nPreview:\n{lines}"


class SimulatedAssistant:
    """Canned replies standing in for model inference. Never calls the network."""

    def __init__(self, delay_seconds: float = 0.0):
        self.delay_seconds = max(0.0, float(delay_seconds))

    def _wait(self, factor: float = 1.0):
        if self.delay_seconds:
            time.sleep(self.delay_seconds * factor)

    def reply_to_message(self, text: str) -> str:
        self._wait()
        logger.info("simulated reply to message len=%s", len(text))
        return GREETING_REPLY

    def reply_to_upload(self, accepted: UploadAccepted) -> str:
        self._wait(1.5)
        logger.info("simulated reply to upload name=%s", accepted.file_name)
        return (
            f'I\'ve successfully processed your CSV file "{accepted.file_name}". '
            "The data looks good! What would you like me to analyze or explain about your data?"
        )
