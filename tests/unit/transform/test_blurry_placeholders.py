"""Tests for the blurry placeholder transform."""

import asyncio

import anyio
import pytest
from structlog.testing import capture_logs

from blurry.config.settings import BlurrySettings, TransformOptions
from blurry.dom.node import Document, Node
from blurry.exceptions import DocumentStructureError
from blurry.image.encoder import BitmapEncoder, DataURIResult
from blurry.transform.blurry_placeholders import (
    AddBlurryImagePlaceholders,
    add_blurry_image_placeholders,
)
from blurry.utils.concurrency import ConcurrencyManager

SVG_PREFIX = "data:image/svg+xml;charset=utf-8,"


def placeholders(node: Node) -> list[Node]:
    return [child for child in node.children if "placeholder" in child.attributes]


def responsive_img(src: str) -> Node:
    return Node("amp-img", {"src": src, "layout": "responsive", "width": "4", "height": "3"})


def document_with(*children: Node) -> Document:
    document, body = Document.with_body()
    for child in children:
        body.append_child(child)
    return document


class FakeEncoder(BitmapEncoder):
    """Encoder that never touches the filesystem."""

    def __init__(self, delay: float = 0.0, fail_on: str | None = None) -> None:
        super().__init__()
        self.delay = delay
        self.fail_on = fail_on
        self.paths: list[str] = []
        self.running = 0
        self.peak = 0

    async def encode(self, image_path: str) -> DataURIResult:
        self.paths.append(image_path)
        self.running += 1
        self.peak = max(self.peak, self.running)
        try:
            await anyio.sleep(self.delay)
            if self.fail_on and image_path.endswith(self.fail_on):
                raise ValueError(f"cannot decode {image_path}")
            return DataURIResult(src="data:image/png;base64,AAAA", width=9, height=7)
        finally:
            self.running -= 1


class TestTransform:
    """Tests for AddBlurryImagePlaceholders.transform."""

    @pytest.mark.asyncio
    async def test_responsive_image(self, sample_jpeg, temp_dir):
        """Test a responsive JPEG gains one placeholder child."""
        img = responsive_img("photo.jpg")
        document = document_with(img)

        results = await AddBlurryImagePlaceholders().transform(
            document, {"imageBasePath": str(temp_dir)}
        )

        assert len(results) == 1 and results[0].success
        [placeholder] = placeholders(img)
        assert placeholder.tag_name == "img"
        assert placeholder.attributes["class"] == "i-amphtml-blurry-placeholder"
        assert placeholder.attributes["placeholder"] == ""
        assert placeholder.attributes["src"].startswith(SVG_PREFIX)
        assert "viewBox='0 0 9 7'" in placeholder.attributes["src"]
        assert results[0].result is placeholder

    @pytest.mark.asyncio
    async def test_video_poster(self, make_image, temp_dir):
        """Test an amp-video poster gains exactly one placeholder child."""
        make_image("poster.jpeg", size=(640, 360))
        video = Node("amp-video", {"poster": "poster.jpeg", "layout": "fixed"})
        video.append_child(Node("source", {"src": "movie.mp4"}))
        document = document_with(video)

        await AddBlurryImagePlaceholders().transform(
            document, TransformOptions(image_base_path=str(temp_dir))
        )

        assert len(placeholders(video)) == 1
        assert video.children[-1] is placeholders(video)[0]
        assert video.children[0].tag_name == "source"

    @pytest.mark.asyncio
    async def test_idempotent(self, sample_jpeg, temp_dir):
        """Test a second run adds nothing."""
        img = responsive_img("photo.jpg")
        document = document_with(img)
        transformer = AddBlurryImagePlaceholders()
        options = {"imageBasePath": str(temp_dir)}

        await transformer.transform(document, options)
        second = await transformer.transform(document, options)

        assert second == []
        assert len(img.children) == 1

    @pytest.mark.asyncio
    async def test_cap_of_five(self):
        """Test eight qualifying images yield five placeholders on the first five."""
        images = [responsive_img(f"{i}.jpg") for i in range(8)]
        document = document_with(*images)

        results = await AddBlurryImagePlaceholders(encoder=FakeEncoder()).transform(document)

        assert len(results) == 5
        assert [len(placeholders(img)) for img in images] == [1] * 5 + [0] * 3

    @pytest.mark.asyncio
    async def test_png_never_qualifies(self):
        """Test PNG references are ignored."""
        img = responsive_img("diagram.png")
        encoder = FakeEncoder()

        results = await AddBlurryImagePlaceholders(encoder=encoder).transform(document_with(img))

        assert results == []
        assert encoder.paths == []
        assert img.children == []

    @pytest.mark.asyncio
    async def test_template_content_ignored(self):
        """Test images inside templates are neither processed nor counted."""
        template = Node("template")
        inert = [responsive_img(f"inert-{i}.jpg") for i in range(5)]
        for img in inert:
            template.append_child(img)
        live = responsive_img("live.jpg")
        document = document_with(template, live)

        results = await AddBlurryImagePlaceholders(encoder=FakeEncoder()).transform(document)

        assert len(results) == 1
        assert len(placeholders(live)) == 1
        assert all(img.children == [] for img in inert)

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, make_image, broken_jpeg, temp_dir):
        """Test one undecodable image does not block its siblings."""
        make_image("one.jpg")
        make_image("two.jpg", size=(300, 400))
        first, broken, second = (
            responsive_img("one.jpg"),
            responsive_img("broken.jpg"),
            responsive_img("two.jpg"),
        )
        document = document_with(first, broken, second)

        with capture_logs() as logs:
            results = await AddBlurryImagePlaceholders().transform(
                document, {"imageBasePath": str(temp_dir)}
            )

        assert [r.success for r in results] == [True, False, True]
        assert len(placeholders(first)) == 1
        assert placeholders(broken) == []
        assert len(placeholders(second)) == 1

        errors = [entry for entry in logs if entry["log_level"] == "error"]
        assert len(errors) == 1
        assert errors[0]["task"] == "AddBlurryImagePlaceholders"
        assert "AddBlurryImagePlaceholders" in errors[0]["event"]
        assert str(broken_jpeg) in errors[0]["error"]
        assert str(broken_jpeg) in results[1].error

    @pytest.mark.asyncio
    async def test_missing_file_is_logged_not_raised(self, temp_dir):
        """Test a missing image only fails its own unit."""
        img = responsive_img("missing.jpg")

        results = await AddBlurryImagePlaceholders().transform(
            document_with(img), {"imageBasePath": str(temp_dir)}
        )

        assert results[0].success is False
        assert "Could not create placeholder for" in results[0].error
        assert img.children == []

    @pytest.mark.asyncio
    async def test_units_run_concurrently(self):
        """Test placeholders are built in parallel."""
        encoder = FakeEncoder(delay=0.05)
        document = document_with(*(responsive_img(f"{i}.jpg") for i in range(3)))

        await AddBlurryImagePlaceholders(encoder=encoder).transform(document)

        assert encoder.peak == 3

    @pytest.mark.asyncio
    async def test_resolves_against_base_path(self, temp_dir):
        """Test references are resolved with imageBasePath before encoding."""
        encoder = FakeEncoder()
        document = document_with(responsive_img("/img/hero.jpg"))

        await AddBlurryImagePlaceholders(encoder=encoder).transform(
            document, {"imageBasePath": str(temp_dir)}
        )

        assert encoder.paths == [str(temp_dir / "img" / "hero.jpg")]

    @pytest.mark.asyncio
    async def test_resolves_against_base_url(self):
        """Test a URL base produces a URL for the encoder."""
        encoder = FakeEncoder()
        document = document_with(responsive_img("hero.jpg"))

        await AddBlurryImagePlaceholders(encoder=encoder).transform(
            document, {"imageBasePath": "https://example.com/img/"}
        )

        assert encoder.paths == ["https://example.com/img/hero.jpg"]

    @pytest.mark.asyncio
    async def test_encode_timeout(self):
        """Test a slow image times out without affecting fast ones."""

        class SlowOnOne(FakeEncoder):
            async def encode(self, image_path: str) -> DataURIResult:
                if image_path.endswith("slow.jpg"):
                    await anyio.sleep(5)
                return await super().encode(image_path)

        slow, fast = responsive_img("slow.jpg"), responsive_img("fast.jpg")
        transformer = AddBlurryImagePlaceholders(encoder=SlowOnOne(), encode_timeout=0.05)

        results = await transformer.transform(document_with(slow, fast))

        assert [r.success for r in results] == [False, True]
        assert "timed out" in results[0].error
        assert placeholders(slow) == []
        assert len(placeholders(fast)) == 1

    @pytest.mark.asyncio
    async def test_missing_html(self):
        """Test a document without html is a structural error."""
        with pytest.raises(DocumentStructureError):
            await AddBlurryImagePlaceholders().transform(Document())

    @pytest.mark.asyncio
    async def test_missing_body(self):
        """Test a document without body is a structural error."""
        document = Document()
        document.root.append_child(Node("html"))

        with pytest.raises(DocumentStructureError) as exc_info:
            await AddBlurryImagePlaceholders().transform(document)

        assert exc_info.value.tag_name == "body"

    @pytest.mark.asyncio
    async def test_head_is_not_searched(self):
        """Test only the body is walked."""
        document, _ = Document.with_body()
        head = document.root.first_child_by_tag("html").first_child_by_tag("head")
        head.append_child(responsive_img("head.jpg"))

        results = await AddBlurryImagePlaceholders(encoder=FakeEncoder()).transform(document)

        assert results == []


class TestReuse:
    """Tests for reusing one transformer across runs."""

    def test_reused_across_event_loops(self):
        """Test a long-lived transformer works in successive event loops."""
        transformer = AddBlurryImagePlaceholders(
            encoder=FakeEncoder(delay=0.01),
            concurrency=ConcurrencyManager(image_workers=2),
        )

        for _ in range(2):
            images = [responsive_img(f"{i}.jpg") for i in range(5)]
            results = asyncio.run(transformer.transform(document_with(*images)))

            assert [r.success for r in results] == [True] * 5
            assert all(len(placeholders(img)) == 1 for img in images)


class TestFactories:
    """Tests for construction helpers."""

    def test_from_settings(self):
        """Test settings feed the concurrency limit and timeout."""
        settings = BlurrySettings(image_workers=2, encode_timeout=3.0)

        transformer = AddBlurryImagePlaceholders.from_settings(settings)

        assert transformer.concurrency.image_workers == 2
        assert transformer.encode_timeout == 3.0
        assert transformer.max_placeholders == 5

    @pytest.mark.asyncio
    async def test_module_level_helper(self, sample_jpeg, temp_dir):
        """Test add_blurry_image_placeholders runs the default transformer."""
        img = responsive_img("photo.jpg")

        results = await add_blurry_image_placeholders(
            document_with(img), {"imageBasePath": str(temp_dir)}
        )

        assert results[0].success
        assert len(placeholders(img)) == 1
