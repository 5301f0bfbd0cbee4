from __future__ import annotations

import json
import uuid
from datetime import timedelta, timezone

import httpx
import pytest

from campus_chat.application.dto.verification import VerificationResult
from campus_chat.application.exceptions import (
    NotAuthenticatedError,
    StoreUnavailableError,
    ValidationError,
)
from campus_chat.application.ports.clock import SYSTEM_CLOCK, epoch_millis
from campus_chat.domain.value_objects.enums import AttachmentKind, VerificationStatus
from campus_chat.domain.value_objects.scope import MessageScope
from campus_chat.infrastructure.storage.supabase_storage import SupabaseStorage
from campus_chat.infrastructure.verification.http_verifier import HttpDocumentVerifier
from campus_chat.services import attachment_service, verification_service
from tests.conftest import T0, FixedClock

MILLIS = int(T0.timestamp() * 1000)


class MemoryStorage:
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str | None]] = {}

    async def upload(self, bucket, path, data, *, content_type=None):
        self.objects[(bucket, path)] = (data, content_type)
        return path

    def public_url(self, bucket, path):
        return f"https://cdn.test/{bucket}/{path}"


class StubVerifier:
    def __init__(self, result: VerificationResult) -> None:
        self.result = result
        self.calls: list[dict] = []

    async def verify(self, document_path, user_id, *, user_type=None, provided_email=None):
        self.calls.append({
            "document_path": document_path,
            "user_id": user_id,
            "user_type": user_type,
            "provided_email": provided_email,
        })
        return self.result


@pytest.mark.parametrize(
    ("filename", "content_type", "expected"),
    [
        ("cat.png", "image/png", AttachmentKind.IMAGE),
        ("clip.mp4", "video/mp4", AttachmentKind.VIDEO),
        ("src.zip", "application/zip", AttachmentKind.ARCHIVE),
        ("src.ZIP", "application/octet-stream", AttachmentKind.ARCHIVE),
        ("notes.pdf", "application/pdf", AttachmentKind.DOCUMENT),
        ("blob", None, AttachmentKind.DOCUMENT),
    ],
)
def test_classify_attachment(filename, content_type, expected):
    assert attachment_service.classify_attachment(filename, content_type) == expected


def test_object_path():
    clock = FixedClock()
    owner = uuid.uuid4()

    assert attachment_service.object_path(owner, "Report.PDF", clock) == f"{owner}/{MILLIS}.pdf"
    assert attachment_service.object_path(owner, "README", clock) == f"{owner}/{MILLIS}"


def test_system_clock_is_utc_and_millis_are_whole():
    assert SYSTEM_CLOCK.now().tzinfo is timezone.utc
    assert epoch_millis(FixedClock(T0 + timedelta(microseconds=1500))) == MILLIS + 1


@pytest.mark.asyncio
async def test_upload_direct_attachment(alice):
    storage = MemoryStorage()

    attachment = await attachment_service.upload_attachment(
        alice, "cat.png", "image/png", b"\x89PNG", storage, clock=FixedClock(),
    )

    path = f"{alice.user_id}/{MILLIS}.png"
    assert storage.objects[(attachment_service.ATTACHMENTS_BUCKET, path)] == (b"\x89PNG", "image/png")
    assert attachment.url == f"https://cdn.test/{attachment_service.ATTACHMENTS_BUCKET}/{path}"
    assert attachment.kind == AttachmentKind.IMAGE


@pytest.mark.asyncio
async def test_group_attachment_stored_under_group(alice):
    storage = MemoryStorage()
    group_id = uuid.uuid4()

    attachment = await attachment_service.upload_attachment(
        alice, "src.zip", "application/zip", b"PK", storage,
        scope=MessageScope.group(group_id), clock=FixedClock(),
    )

    assert attachment.url.endswith(f"/{group_id}/{MILLIS}.zip")
    assert attachment.kind == AttachmentKind.ARCHIVE


@pytest.mark.asyncio
async def test_empty_or_anonymous_upload_rejected(alice):
    storage = MemoryStorage()

    with pytest.raises(ValidationError):
        await attachment_service.upload_attachment(alice, "a.txt", "text/plain", b"", storage)
    with pytest.raises(NotAuthenticatedError):
        await attachment_service.upload_attachment(None, "a.txt", "text/plain", b"x", storage)
    assert storage.objects == {}


@pytest.mark.asyncio
async def test_verification_uploads_then_verifies(alice):
    storage = MemoryStorage()
    verifier = StubVerifier(VerificationResult(VerificationStatus.VERIFIED, 0.92))

    result = await verification_service.submit_verification(
        alice, "id.jpg", "image/jpeg", b"jpeg", storage, verifier,
        user_type="student", email="alice@mit.edu", clock=FixedClock(),
    )

    path = f"{alice.user_id}/{MILLIS}.jpg"
    assert (verification_service.VERIFICATION_BUCKET, path) in storage.objects
    assert verifier.calls == [{
        "document_path": path,
        "user_id": alice.user_id,
        "user_type": "student",
        "provided_email": "alice@mit.edu",
    }]
    assert result.status == VerificationStatus.VERIFIED


@pytest.mark.asyncio
async def test_supabase_storage_posts_object():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"Key": "chat-attachments/u/1.png"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    storage = SupabaseStorage("https://proj.supabase.co/", "service", client=client)

    stored = await storage.upload("chat-attachments", "u/1.png", b"data", content_type="image/png")
    await storage.aclose()

    assert stored == "u/1.png"
    [request] = requests
    assert str(request.url) == "https://proj.supabase.co/storage/v1/object/chat-attachments/u/1.png"
    assert request.headers["authorization"] == "Bearer service"
    assert request.headers["content-type"] == "image/png"
    assert storage.public_url("chat-attachments", "u/1.png") == (
        "https://proj.supabase.co/storage/v1/object/public/chat-attachments/u/1.png"
    )


@pytest.mark.asyncio
async def test_supabase_storage_rejection_is_unavailable():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(400, text="bad bucket")),
    )
    storage = SupabaseStorage("https://proj.supabase.co", "service", client=client)

    with pytest.raises(StoreUnavailableError):
        await storage.upload("nope", "u/1.png", b"data")


@pytest.mark.asyncio
async def test_http_verifier_maps_response():
    bodies: list[dict] = []
    user_id = uuid.uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"status": "limited_access", "match_score": "0.4"})

    verifier = HttpDocumentVerifier(
        "https://proj.supabase.co/functions/v1/verify-document", "service",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    result = await verifier.verify("u/1.jpg", user_id, user_type="student")

    assert result == VerificationResult(VerificationStatus.LIMITED_ACCESS, 0.4)
    assert bodies[0]["user_id"] == str(user_id)
    assert bodies[0]["provided_email"] is None


@pytest.mark.asyncio
async def test_http_verifier_unknown_status_is_pending():
    verifier = HttpDocumentVerifier(
        "https://verify.test", "service",
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"status": "???"})),
        ),
    )

    result = await verifier.verify("u/1.jpg", uuid.uuid4())

    assert result == VerificationResult(VerificationStatus.PENDING, 0.0)


@pytest.mark.asyncio
async def test_http_verifier_server_error_is_unavailable():
    verifier = HttpDocumentVerifier(
        "https://verify.test", "service",
        client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(502))),
    )

    with pytest.raises(StoreUnavailableError):
        await verifier.verify("u/1.jpg", uuid.uuid4())
