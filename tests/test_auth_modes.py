import base64
import json
import pytest
from csvchat.services.auth_easy_auth import get_user_from_easy_auth, is_domain_allowed


def test_easy_auth_from_debug_headers():
    user = get_user_from_easy_auth({"X-DEBUG-EMAIL": "u@contoso.com", "X-DEBUG-NAME": "U"})
    assert user.email == "u@contoso.com"
    assert user.oid == "debug-oid"


def test_easy_auth_from_principal_claims():
    principal = {
        "userDetails": "fallback",
        "claims": [
            {"typ": "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name", "val": "Ada"},
            {"typ": "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/upn", "val": "ada@contoso.com"},
            {"typ": "http://schemas.microsoft.com/identity/claims/objectidentifier", "val": "oid-1"},
        ],
    }
    header = base64.b64encode(json.dumps(principal).encode("utf-8")).decode("ascii")
    user = get_user_from_easy_auth({"X-MS-CLIENT-PRINCIPAL": header})
    assert (user.name, user.email, user.oid) == ("Ada", "ada@contoso.com", "oid-1")


def test_easy_auth_missing_header():
    with pytest.raises(RuntimeError):
        get_user_from_easy_auth({})


@pytest.mark.parametrize("email,domains,ok", [
    ("a@contoso.com", [], True),
    ("a@contoso.com", ["contoso.com"], True),
    ("a@eu.contoso.com", ["contoso.com"], True),
    ("a@evilcontoso.com", ["contoso.com"], False),
])
def test_domain_gate(email, domains, ok):
    assert is_domain_allowed(email, domains) is ok


def test_easy_auth_top_level_fields_without_claims():
    principal = {"userDetails": "Bo", "userPrincipalName": "bo@contoso.com"}
    header = base64.b64encode(json.dumps(principal).encode("utf-8")).decode("ascii")
    user = get_user_from_easy_auth({"X-MS-CLIENT-PRINCIPAL": header})
    assert (user.name, user.email, user.oid) == ("Bo", "bo@contoso.com", "")


def test_easy_auth_principal_without_email():
    header = base64.b64encode(json.dumps({"userDetails": "Bo"}).encode("utf-8")).decode("ascii")
    with pytest.raises(RuntimeError):
        get_user_from_easy_auth({"X-MS-CLIENT-PRINCIPAL": header})
