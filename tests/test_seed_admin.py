from scripts import seed_admin


def test_seed_admin_registers_admin_role(identity, monkeypatch):
    monkeypatch.setattr(seed_admin, "get_identity_provider", lambda: identity)

    status = seed_admin.main(["--email", "root@example.com", "--password", "secureAdmin1"])

    assert status == 0
    assert identity.accounts["root@example.com"][1]["user_metadata"] == {"role": "admin"}


def test_seed_admin_reports_provider_error(identity, monkeypatch):
    monkeypatch.setattr(seed_admin, "get_identity_provider", lambda: identity)
    seed_admin.main(["--email", "root@example.com", "--password", "secureAdmin1"])

    assert seed_admin.main(["--email", "root@example.com", "--password", "secureAdmin1"]) == 1


def test_seed_admin_needs_a_password(monkeypatch):
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

    assert seed_admin.main(["--email", "root@example.com"]) == 1
