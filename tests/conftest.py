from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import unquote

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from iiifdims.actions.media_attributes import JP2_FILE, ORIGINAL_FILE
from iiifdims.config import config
from iiifdims.database import get_db
from iiifdims.main import app
from iiifdims.models import (
    Base,
    File,
    Media,
    MediaBundle,
    Node,
    TaxonomyTerm,
    User,
)
from iiifdims.routes.actions import get_iiif_info
from iiifdims.routes.auth import get_current_user
from iiifdims.services.iiif import IiifInfo, open_iiif_info
from iiifdims.utils.auth import get_password_hash

FILES_BASE = "http://files.test"
IIIF_BASE = "http://iiif.test/iiif/2"
IIIF_PREFIX = "/iiif/2/"


class FakeIiifServer:
    """Answers info.json requests for files registered with :meth:`add`."""

    def __init__(self) -> None:
        self.sizes: dict[str, tuple[object, object]] = {}
        self.failures: dict[str, int] = {}
        self.requested: list[str] = []

    def add(self, filename: str, width: object, height: object) -> None:
        self.sizes[f"{FILES_BASE}/{filename}"] = (width, height)

    def fail(self, filename: str, status_code: int = 500) -> None:
        self.failures[f"{FILES_BASE}/{filename}"] = status_code

    def handler(self, request: httpx.Request) -> httpx.Response:
        raw_path = request.url.raw_path.decode("ascii").split("?", 1)[0]
        if not raw_path.startswith(IIIF_PREFIX) or not raw_path.endswith(
            "/info.json"
        ):
            return httpx.Response(404)

        identifier = raw_path[len(IIIF_PREFIX) : -len("/info.json")]
        file_url = unquote(identifier)
        self.requested.append(file_url)

        if file_url in self.failures:
            return httpx.Response(self.failures[file_url], text="upstream error")
        if file_url not in self.sizes:
            return httpx.Response(404, json={"error": "not found"})

        width, height = self.sizes[file_url]
        return httpx.Response(
            200,
            json={
                "@context": "http://iiif.io/api/image/2/context.json",
                "@id": f"{IIIF_BASE}/{identifier}",
                "protocol": "http://iiif.io/api/image",
                "width": width,
                "height": height,
            },
        )


@dataclass
class Seed:
    """Ids of the rows every test starts with, plus media helpers."""

    session_factory: async_sessionmaker[AsyncSession]
    owner_id: int
    other_id: int
    admin_id: int
    node_id: int
    terms: dict[str, int] = field(default_factory=dict)

    async def add_node(self, title: str = "Another node") -> int:
        async with self.session_factory() as session:
            node = Node(title=title, owner_id=self.owner_id)
            session.add(node)
            await session.commit()
            return node.id

    async def add_media(
        self,
        *,
        mime_type: str | None = "image/tiff",
        uses: Sequence[str] = (ORIGINAL_FILE.term_uri,),
        bundle: MediaBundle = MediaBundle.IMAGE,
        filename: str | None = None,
        node_id: int | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> tuple[int, str]:
        """Create a media (with a source file unless ``mime_type`` is None)."""
        filename = filename or f"{uuid.uuid4().hex[:10]}.bin"
        async with self.session_factory() as session:
            source = None
            if mime_type is not None:
                source = File(
                    filename=filename,
                    uri=f"public://{filename}",
                    mime_type=mime_type,
                )
                session.add(source)
                await session.flush()

            media = Media(
                name=filename,
                bundle=bundle.value,
                media_of_id=node_id or self.node_id,
                file_id=source.id if source else None,
                width=width,
                height=height,
            )
            media.media_use = [
                await session.get(TaxonomyTerm, self.terms[uri]) for uri in uses
            ]
            session.add(media)
            await session.commit()
            return media.id, filename

    async def get_media(self, media_id: int) -> Media:
        async with self.session_factory() as session:
            media = await session.get(Media, media_id)
            assert media is not None
            return media


@pytest.fixture
def files_base_url(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(config, "FILES_BASE_URL", FILES_BASE)
    return FILES_BASE


@pytest.fixture
async def session_factory() -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def seed(
    session_factory: async_sessionmaker[AsyncSession], files_base_url: str
) -> Seed:
    async with session_factory() as session:
        owner = User(email="owner@example.com", hashed_password=get_password_hash("x"))
        other = User(email="other@example.com", hashed_password=get_password_hash("x"))
        admin = User(
            email="admin@example.com",
            hashed_password=get_password_hash("x"),
            is_admin=True,
        )
        session.add_all([owner, other, admin])
        await session.flush()

        node = Node(title="Map of the harbour", owner_id=owner.id)
        original = TaxonomyTerm(
            name="Original File", external_uri=ORIGINAL_FILE.term_uri
        )
        jp2 = TaxonomyTerm(name="JP2 File", external_uri=JP2_FILE.term_uri)
        session.add_all([node, original, jp2])
        await session.commit()

        return Seed(
            session_factory=session_factory,
            owner_id=owner.id,
            other_id=other.id,
            admin_id=admin.id,
            node_id=node.id,
            terms={
                ORIGINAL_FILE.term_uri: original.id,
                JP2_FILE.term_uri: jp2.id,
            },
        )


@pytest.fixture
def iiif_server() -> FakeIiifServer:
    return FakeIiifServer()


@pytest.fixture
async def iiif_info(iiif_server: FakeIiifServer) -> IiifInfo:
    async with open_iiif_info(
        IIIF_BASE, transport=httpx.MockTransport(iiif_server.handler)
    ) as info:
        yield info


@dataclass
class ApiContext:
    client: AsyncClient
    seed: Seed
    iiif_server: FakeIiifServer
    user_id: int | None

    def login_as(self, user_id: int | None) -> None:
        self.user_id = user_id


@pytest.fixture
async def api(
    seed: Seed, iiif_server: FakeIiifServer, iiif_info: IiifInfo
) -> ApiContext:
    async def override_get_db():
        async with seed.session_factory() as session:
            yield session

    async def override_iiif_info():
        yield iiif_info

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context = ApiContext(
            client=client, seed=seed, iiif_server=iiif_server, user_id=seed.owner_id
        )

        async def override_current_user() -> User | None:
            if context.user_id is None:
                return None
            async with seed.session_factory() as session:
                return await session.get(User, context.user_id)

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_iiif_info] = override_iiif_info
        app.dependency_overrides[get_current_user] = override_current_user

        yield context

    app.dependency_overrides.clear()
