from __future__ import annotations
import base64
import json
from typing import Dict, List

from csvchat.models.schemas import UserPrincipal

OFFLINE_USER = UserPrincipal(name="Demo User", email="demo.user@contoso.com", oid="demo-oid")

# claim type suffix -> principal field; later claims win
CLAIM_FIELDS = (
    ("/name", "name"),
    ("/emailaddress", "email"),
    ("/upn", "email"),
    ("/objectidentifier", "oid"),
)


def _debug_principal(headers: Dict[str, str]) -> UserPrincipal:
    email = headers.get("X-DEBUG-EMAIL")
    if not email:
        raise RuntimeError("Missing Easy Auth principal header.")
    return UserPrincipal(
        name=headers.get("X-DEBUG-NAME") or email,
        email=email,
        oid=headers.get("X-DEBUG-OID") or "debug-oid",
    )


def _claims_to_fields(payload: dict) -> Dict[str, str]:
    fields = {
        "name": payload.get("name") or payload.get("userDetails") or "",
        "email": payload.get("userPrincipalName") or "",
        "oid": "",
    }
    for claim in payload.get("claims", []):
        typ = claim.get("typ", "")
        for suffix, field in CLAIM_FIELDS:
            if typ.endswith(suffix):
                fields[field] = claim.get("val", fields[field])
    return fields


def get_user_from_easy_auth(headers: Dict[str, str]) -> UserPrincipal:
    """
    Identity from App Service Easy Auth (base64 JSON in X-MS-CLIENT-PRINCIPAL).
    Without that header, X-DEBUG-* headers are accepted for local runs.
    """
    encoded = headers.get("X-MS-CLIENT-PRINCIPAL")
    if not encoded:
        return _debug_principal(headers)
    fields = _claims_to_fields(json.loads(base64.b64decode(encoded).decode("utf-8")))
    if not fields["email"]:
        raise RuntimeError("Easy Auth missing email in claims.")
    return UserPrincipal(name=fields["name"] or fields["email"], email=fields["email"], oid=fields["oid"])


def is_domain_allowed(email: str, allowed_domains: List[str]) -> bool:
    if not allowed_domains:
        return True
    domain = email.lower().split("@")[-1]
    return any(domain == d or domain.endswith("." + d) for d in allowed_domains)
