"""
Blog API — Blog Service Unit Tests
====================================

What:  Tests for BlogService business logic (find, list, create, update, delete).
How:   Uses mock DB sessions and a mocked image service (no real DB or disk).

What we test:
    ✅ Image paths rewritten to absolute URLs in responses, URLs untouched
    ✅ Blog not found raises NotFoundError
    ✅ Create/update hand the right values to the image service
    ✅ Failed insert or update removes the freshly stored file
    ✅ Delete removes the image before the record
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from blog_api.exceptions import DatabaseError, InvalidImageTypeError, NotFoundError
from blog_api.models.blog import Blog
from blog_api.schemas.blog import BlogPayload
from blog_api.services.blog_service import BlogService

BASE_URL = "http://test/"


def _mock_blog(data):
    blog = MagicMock()
    for key, value in data.items():
        setattr(blog, key, value)
    return blog


def _result_with(blog):
    result = MagicMock()
    result.scalar_one_or_none.return_value = blog
    return result


def _payload(**overrides):
    fields = {
        "title": "Updated title",
        "description": "Updated body",
        "image": "data:image/png;base64,iVBORw0KGgo=",
        "author": "Alex",
    }
    fields.update(overrides)
    return BlogPayload(**fields)


def _mock_image_service(stored_path="storage/blogs/blog_1700000100_0123456789abc.png"):
    service = MagicMock()
    service.store_image = AsyncMock(return_value=stored_path)
    service.delete_image = AsyncMock(return_value=True)
    service.public_url.side_effect = lambda image, base: (
        image if image.startswith("http") else f"{base.rstrip('/')}/{image}"
    )
    return service


async def _fill_server_defaults(obj):
    """Stands in for db.refresh(): assigns what the database would."""
    now = datetime.now(timezone.utc)
    if obj.id is None:
        obj.id = 42
    obj.created_at = obj.created_at or now
    obj.updated_at = now


class TestBlogServiceRead:
    """Tests for find_blog, to_response and list_blogs."""

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_find_blog_rewrites_local_image(self, mock_db_session, sample_blog_data):
        mock_db_session.execute.return_value = _result_with(_mock_blog(sample_blog_data))

        blog = await self.service.find_blog(mock_db_session, 1)
        result = self.service.to_response(blog, BASE_URL)

        assert result.id == 1
        assert result.title == sample_blog_data["title"]
        assert result.image == f"http://test/{sample_blog_data['image']}"

    def test_to_response_keeps_url_image(self, sample_blog_data):
        sample_blog_data["image"] = "https://cdn.example.com/cover.png"

        result = self.service.to_response(_mock_blog(sample_blog_data), BASE_URL)

        assert result.image == "https://cdn.example.com/cover.png"

    @pytest.mark.asyncio
    async def test_find_blog_not_found(self, mock_db_session):
        mock_db_session.execute.return_value = _result_with(None)

        with pytest.raises(NotFoundError, match="Blog with ID '7' was not found"):
            await self.service.find_blog(mock_db_session, 7)

    @pytest.mark.asyncio
    async def test_find_blog_query_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(DatabaseError):
            await self.service.find_blog(mock_db_session, 1)

    @pytest.mark.asyncio
    async def test_list_blogs(self, mock_db_session, sample_blog_data):
        second = dict(sample_blog_data, id=2, image="https://cdn.example.com/2.png")
        result = MagicMock()
        result.scalars.return_value.all.return_value = [
            _mock_blog(second),
            _mock_blog(sample_blog_data),
        ]
        mock_db_session.execute.return_value = result

        blogs = await self.service.list_blogs(mock_db_session, BASE_URL)

        assert [b.id for b in blogs] == [2, 1]
        assert blogs[0].image == "https://cdn.example.com/2.png"
        assert blogs[1].image == f"http://test/{sample_blog_data['image']}"

    @pytest.mark.asyncio
    async def test_list_blogs_empty(self, mock_db_session):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = result

        assert await self.service.list_blogs(mock_db_session, BASE_URL) == []

    @pytest.mark.asyncio
    async def test_list_does_not_mutate_records(self, mock_db_session, sample_blog_data):
        blog = _mock_blog(sample_blog_data)
        result = MagicMock()
        result.scalars.return_value.all.return_value = [blog]
        mock_db_session.execute.return_value = result

        await self.service.list_blogs(mock_db_session, BASE_URL)

        assert blog.image == sample_blog_data["image"]


class TestBlogServiceWrite:
    """Tests for create_blog, update_blog and delete_blog."""

    def setup_method(self):
        self.service = BlogService()

    @pytest.mark.asyncio
    async def test_create_blog_stores_image_and_inserts(self, mock_db_session):
        mock_db_session.refresh = AsyncMock(side_effect=_fill_server_defaults)
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            result = await self.service.create_blog(mock_db_session, _payload(), BASE_URL)

        image.store_image.assert_awaited_once_with("data:image/png;base64,iVBORw0KGgo=")
        added = mock_db_session.add.call_args.args[0]
        assert isinstance(added, Blog)
        assert added.image == "storage/blogs/blog_1700000100_0123456789abc.png"
        assert result.id == 42
        assert result.image == "http://test/storage/blogs/blog_1700000100_0123456789abc.png"

    @pytest.mark.asyncio
    async def test_create_blog_image_error_skips_insert(self, mock_db_session):
        image = _mock_image_service()
        image.store_image.side_effect = InvalidImageTypeError("bmp", ["png"])

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(InvalidImageTypeError):
                await self.service.create_blog(mock_db_session, _payload(), BASE_URL)

        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_blog_insert_failure_removes_file(self, mock_db_session):
        mock_db_session.flush.side_effect = RuntimeError("insert failed")
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(DatabaseError):
                await self.service.create_blog(mock_db_session, _payload(), BASE_URL)

        image.delete_image.assert_awaited_once_with(
            "storage/blogs/blog_1700000100_0123456789abc.png"
        )

    @pytest.mark.asyncio
    async def test_create_blog_insert_failure_keeps_url(self, mock_db_session):
        url = "https://cdn.example.com/cover.png"
        mock_db_session.flush.side_effect = RuntimeError("insert failed")
        image = _mock_image_service(stored_path=url)

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(DatabaseError):
                await self.service.create_blog(mock_db_session, _payload(image=url), BASE_URL)

        image.delete_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_blog_passes_old_image(self, mock_db_session, sample_blog_data):
        blog = Blog(**sample_blog_data)
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            result = await self.service.update_blog(mock_db_session, blog, _payload(), BASE_URL)

        image.store_image.assert_awaited_once_with(
            "data:image/png;base64,iVBORw0KGgo=", sample_blog_data["image"]
        )
        assert blog.title == "Updated title"
        assert blog.author == "Alex"
        assert blog.image == "storage/blogs/blog_1700000100_0123456789abc.png"
        assert result.description == "Updated body"
        mock_db_session.flush.assert_awaited()

    @pytest.mark.asyncio
    async def test_update_blog_flush_failure_removes_new_file(self, mock_db_session, sample_blog_data):
        blog = Blog(**sample_blog_data)
        mock_db_session.flush.side_effect = RuntimeError("update failed")
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(DatabaseError):
                await self.service.update_blog(mock_db_session, blog, _payload(), BASE_URL)

        image.delete_image.assert_awaited_once_with(
            "storage/blogs/blog_1700000100_0123456789abc.png"
        )

    @pytest.mark.asyncio
    async def test_update_blog_flush_failure_keeps_url(self, mock_db_session, sample_blog_data):
        url = "https://cdn.example.com/cover.png"
        blog = Blog(**sample_blog_data)
        mock_db_session.flush.side_effect = RuntimeError("update failed")
        image = _mock_image_service(stored_path=url)

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(DatabaseError):
                await self.service.update_blog(mock_db_session, blog, _payload(image=url), BASE_URL)

        image.delete_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_blog_removes_image_then_record(self, mock_db_session, sample_blog_data):
        blog = _mock_blog(sample_blog_data)
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            await self.service.delete_blog(mock_db_session, blog)

        image.delete_image.assert_awaited_once_with(sample_blog_data["image"])
        mock_db_session.delete.assert_awaited_once_with(blog)

    @pytest.mark.asyncio
    async def test_delete_blog_failure_raises_database_error(self, mock_db_session, sample_blog_data):
        mock_db_session.flush.side_effect = RuntimeError("delete failed")
        image = _mock_image_service()

        with patch("blog_api.services.blog_service.image_service", image):
            with pytest.raises(DatabaseError):
                await self.service.delete_blog(mock_db_session, _mock_blog(sample_blog_data))
