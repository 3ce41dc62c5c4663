from io import BytesIO

import pytest
from starlette.datastructures import Headers, UploadFile

from conselho.errors import ValidationFailure
from conselho.store import JsonStore
from conselho.uploads import PDF_POLICY, PHOTO_POLICY, UploadStorage, has_file
from conselho.users import UserStore


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_storage_dir_created_lazily(tmp_path):
    storage = UploadStorage(tmp_path / "uploads")
    assert not (tmp_path / "uploads").exists()

    stored = storage.save(make_upload(b"%PDF", "Ofício.PDF", "application/pdf"), "arquivo")

    assert (tmp_path / "uploads" / stored.filename).read_bytes() == b"%PDF"
    assert stored.reference == f"/uploads/{stored.filename}"
    assert stored.filename.startswith("arquivo-")
    assert stored.filename.endswith(".PDF")
    assert stored.original_name == "Ofício.PDF"


def test_generated_names_do_not_collide(tmp_path):
    storage = UploadStorage(tmp_path)
    names = {storage.save(make_upload(b"x", "a.pdf", "application/pdf"), "arquivo").filename for _ in range(20)}
    assert len(names) == 20


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"])
def test_photo_policy_accepts_images(tmp_path, content_type):
    UploadStorage(tmp_path).validate(make_upload(b"img", "f", content_type), PHOTO_POLICY)


@pytest.mark.parametrize("content_type", ["application/pdf", "image/svg+xml", "text/plain", ""])
def test_photo_policy_rejects_other_types(tmp_path, content_type):
    with pytest.raises(ValidationFailure):
        UploadStorage(tmp_path).validate(make_upload(b"x", "f", content_type), PHOTO_POLICY)


def test_pdf_policy_size_limit(tmp_path):
    storage = UploadStorage(tmp_path)
    limit = PDF_POLICY.max_bytes

    storage.validate(make_upload(b"\x00" * limit, "ok.pdf", "application/pdf"), PDF_POLICY)
    with pytest.raises(ValidationFailure) as exc:
        storage.validate(make_upload(b"\x00" * (limit + 1), "big.pdf", "application/pdf"), PDF_POLICY)
    assert exc.value.message == PDF_POLICY.size_error


def test_validate_does_not_consume_file(tmp_path):
    storage = UploadStorage(tmp_path)
    upload = make_upload(b"%PDF-data", "a.pdf", "application/pdf")

    storage.validate(upload, PDF_POLICY)
    stored = storage.save(upload, "arquivo")

    assert (tmp_path / stored.filename).read_bytes() == b"%PDF-data"


def test_resolve_stays_inside_root(tmp_path):
    storage = UploadStorage(tmp_path / "uploads")
    assert storage.resolve("/uploads/a.pdf") == tmp_path / "uploads" / "a.pdf"
    assert storage.resolve("/uploads/../../etc/passwd") == tmp_path / "uploads" / "passwd"
    assert storage.resolve("") is None


def test_discard_missing_file_is_quiet(tmp_path):
    UploadStorage(tmp_path).discard("/uploads/nao-existe.pdf")


def test_has_file():
    assert has_file(make_upload(b"x", "a.pdf", "application/pdf"))
    assert not has_file(make_upload(b"", "", "application/octet-stream"))
    assert not has_file("texto")
    assert not has_file(None)


def test_update_profile_is_presence_driven(tmp_path):
    users = UserStore(JsonStore(tmp_path))
    users.users.write_all(
        [{"id": 1, "username": "ana", "nomeCompleto": "Ana Silva", "telefone": "111", "foto": ""}]
    )

    result = users.update_profile(1, {"telefone": "222"})

    assert result["nomeCompleto"] == "Ana Silva"
    assert result["telefone"] == "222"
    assert result["foto"] == ""


def test_update_profile_ignores_other_fields(tmp_path):
    users = UserStore(JsonStore(tmp_path))
    users.ensure_seeded("admin", "admin123")

    result = users.update_profile(1, {"role": "root", "passwordHash": "x", "username": "hack"})

    assert result["role"] == "admin"
    assert result["username"] == "admin"
    assert users.verify_password(result, "admin123")
