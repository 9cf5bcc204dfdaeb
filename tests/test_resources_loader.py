"""Tests for resource loaders and prefix dispatch."""

from pathlib import Path

import pytest

from unires.config import LoaderConfig
from unires.exceptions import ResolutionError, UnresolvableLocatorError
from unires.resources.base import Resource
from unires.resources.context import LookupContext
from unires.resources.loader import (
    CLASSPATH_URL_PREFIX,
    DefaultResourceLoader,
    FileSystemResourceLoader,
    PackageRelativeResourceLoader,
    ResourceLoader,
    get_default_loader,
)
from unires.resources.types import (
    ClasspathResource,
    FileResource,
    FileUrlResource,
    UrlResource,
)

WELL_FORMED_LOCATIONS = [
    "",
    "   ",
    "relative/path.txt",
    "../outside.txt",
    "/absolute/path.txt",
    "C:\\data\\x.txt",
    "C:/data/x.txt",
    "classpath:",
    "classpath:config/app.yaml",
    "classpath:../escape.txt",
    "file:/tmp/x.txt",
    "file:///tmp/x.txt",
    "http:",
    "https://example.com/a.json",
    "ftp://example.com/a.txt",
    "mailto:someone@example.com",
    "foo:bar",
    "name with spaces.txt",
]


@pytest.fixture
def loader():
    return DefaultResourceLoader(base_path="/srv/app")


@pytest.mark.parametrize("location", WELL_FORMED_LOCATIONS)
def test_get_resource_is_total(loader, location):
    """Test that resolution always yields a handle and never raises."""
    resource = loader.get_resource(location)
    assert isinstance(resource, Resource)
    assert resource.get_description()


def test_get_resource_rejects_non_strings(loader):
    with pytest.raises(TypeError):
        loader.get_resource(Path("/tmp/x.txt"))


def test_loader_is_a_resource_loader(loader):
    assert isinstance(loader, ResourceLoader)
    assert CLASSPATH_URL_PREFIX == "classpath:"


class TestDispatch:
    def test_classpath_prefix(self, loader):
        resource = loader.get_resource("classpath:config/app.yaml")
        assert isinstance(resource, ClasspathResource)
        assert resource.path == "config/app.yaml"
        assert resource.context is loader.get_lookup_context()

    def test_classpath_prefix_wins_over_url_syntax(self, loader):
        resource = loader.get_resource("classpath:http://example.com/app.yaml")
        assert isinstance(resource, ClasspathResource)

    def test_file_url(self, loader):
        resource = loader.get_resource("file:/tmp/x.txt")
        assert isinstance(resource, FileUrlResource)
        assert resource.get_file() == Path("/tmp/x.txt")

    def test_http_url(self, loader):
        resource = loader.get_resource("https://example.com/a.json")
        assert isinstance(resource, UrlResource)
        assert not isinstance(resource, FileUrlResource)
        assert str(resource.get_url()) == "https://example.com/a.json"
        with pytest.raises(ResolutionError):
            resource.get_file()
        with pytest.raises(UnresolvableLocatorError):
            resource.get_file()

    def test_relative_path_uses_base(self, loader):
        resource = loader.get_resource("relative/path.txt")
        assert isinstance(resource, FileResource)
        assert resource.path == Path("/srv/app/relative/path.txt")
        assert str(resource.get_file()) == "/srv/app/relative/path.txt"

    def test_folder_location_resolves_children_inside_it(self, loader):
        folder = loader.get_resource("conf/")
        child = folder.create_relative("app.yaml")
        assert child.get_file() == Path("/srv/app/conf/app.yaml")

    def test_paths_are_cleaned(self, loader):
        resource = loader.get_resource("a/../b.txt")
        assert resource.path == Path("/srv/app/b.txt")
        assert resource.get_description() == "file [/srv/app/b.txt]"
        assert resource == loader.get_resource("./b.txt")

    def test_root_base_path(self):
        resource = DefaultResourceLoader(base_path="/").get_resource("x.txt")
        assert resource.path == Path("/x.txt")

    def test_absolute_path_ignores_base(self, loader):
        resource = loader.get_resource("/etc/app.yaml")
        assert resource.get_file() == Path("/etc/app.yaml")

    @pytest.mark.parametrize("location", ["C:/data/x.txt", "http:", "foo:bar", "ftp://h/x"])
    def test_unrecognized_schemes_are_paths(self, loader, location):
        assert isinstance(loader.get_resource(location), FileResource)

    def test_no_base_path(self):
        resource = DefaultResourceLoader().get_resource("relative/path.txt")
        assert isinstance(resource, FileResource)
        assert resource.path == Path("relative/path.txt")

    @pytest.mark.asyncio
    async def test_resolution_is_lazy(self, tmp_path):
        loader = DefaultResourceLoader(base_path=tmp_path)
        resource = loader.get_resource("not/there.txt")
        assert await resource.exists() is False


class TestConfiguration:
    def test_config_base_path(self, tmp_path):
        loader = DefaultResourceLoader.from_config(LoaderConfig(base_path=tmp_path))
        assert loader.base_path == tmp_path
        assert loader.get_resource("x.txt").get_file() == tmp_path / "x.txt"

    def test_explicit_base_path_wins(self, tmp_path):
        config = LoaderConfig(base_path="/ignored")
        loader = DefaultResourceLoader(base_path=tmp_path, config=config)
        assert loader.base_path == tmp_path

    def test_http_settings_reach_resources(self):
        config = LoaderConfig(
            http_timeout=7.5, max_redirects=2, http_headers={"Accept": "application/json"}
        )
        resource = DefaultResourceLoader(config=config).get_resource("http://example.com/a")
        assert resource.timeout == 7.5
        assert resource.max_redirects == 2
        assert resource.headers == {"Accept": "application/json"}

    def test_lookup_context(self):
        assert DefaultResourceLoader().get_lookup_context() == LookupContext()
        anchored = DefaultResourceLoader(config=LoaderConfig(classpath_anchor="email"))
        assert anchored.get_lookup_context().anchor == "email"
        explicit = LookupContext(anchor="json")
        assert DefaultResourceLoader(lookup_context=explicit).get_lookup_context() is explicit

    def test_default_loader_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("UNIRES_BASE_PATH", str(tmp_path))
        get_default_loader.cache_clear()
        try:
            loader = get_default_loader()
            assert loader.base_path == tmp_path
            assert get_default_loader() is loader
        finally:
            get_default_loader.cache_clear()


class TestFileSystemResourceLoader:
    def test_leading_slash_is_relative_to_base(self):
        loader = FileSystemResourceLoader(base_path="/srv/app")
        resource = loader.get_resource("/conf/app.yaml")
        assert resource.get_file() == Path("/srv/app/conf/app.yaml")

    def test_urls_still_dispatch(self):
        loader = FileSystemResourceLoader(base_path="/srv/app")
        assert isinstance(loader.get_resource("file:/tmp/x.txt"), FileUrlResource)


@pytest.mark.asyncio
class TestPackageRelativeResourceLoader:
    async def test_paths_resolve_inside_anchor(self):
        loader = PackageRelativeResourceLoader("email")
        resource = loader.get_resource("mime/text.py")
        assert isinstance(resource, ClasspathResource)
        assert resource.context.anchor == "email"
        assert await resource.exists() is True

    async def test_classpath_prefix_uses_lookup_context(self):
        loader = PackageRelativeResourceLoader("email")
        resource = loader.get_resource("classpath:json/decoder.py")
        assert resource.context == loader.get_lookup_context()
        assert resource.context.anchor is None
        assert await resource.exists() is True
        assert b"JSONDecoder" in await resource.read()
