# File: tests/test_revision.py
import pytest

from vgo2nix.revision import normalize


@pytest.mark.parametrize(
    "import_path,version,expected",
    [
        # pseudo-version with +incompatible, path ends in a major-version segment
        ("example.com/pkg/v2", "v2.1.1-0.20190517191504-25dcb96d9e51+incompatible", "25dcb96d9e51"),
        # plain incompatible release of a nested module gets the subdirectory prefix
        ("example.com/org/repo/subpkg", "v1.2.3+incompatible", "subpkg/v1.2.3"),
        # commit of a nested module: no prefix
        ("example.com/org/repo/subpkg", "v0.0.0-20181204163529-d75b2dcb6bc8", "d75b2dcb6bc8"),
        ("github.com/ugorji/go/codec", "v0.0.0-20181204163529-d75b2dcb6bc8", "d75b2dcb6bc8"),
        # pseudo-version based on a prerelease tag
        ("golang.org/x/sys", "v0.0.0-20190215142949-d0b11bdaac8a", "d0b11bdaac8a"),
        ("github.com/a/b", "v1.4.1-0.20200101120000-abcdefabcdef", "abcdefabcdef"),
        # plain tags
        ("github.com/pkg/errors", "v0.8.1", "v0.8.1"),
        ("github.com/docker/docker", "v17.12.0-ce-rc1.0.20200309214505-aa6a9891b09c+incompatible", "aa6a9891b09c"),
        ("github.com/coreos/etcd", "v3.3.10+incompatible", "v3.3.10"),
        # nested module release tags
        ("cloud.google.com/go/storage/internal", "v1.0.0", "internal/v1.0.0"),
        ("github.com/Azure/go-autorest/autorest", "v0.9.0", "autorest/v0.9.0"),
        # nested module whose last segment is a major version keeps the plain tag
        ("github.com/org/repo/sub/v3", "v3.1.0", "v3.1.0"),
        ("github.com/go-redis/redis/v8", "v8.4.4", "v8.4.4"),
    ],
)
def test_normalize_examples(import_path, version, expected):
    assert normalize(import_path, version) == expected


@pytest.mark.parametrize(
    "version",
    ["master", "d75b2dc", "release-1.2", "v1.2", "1.2.3", ""],
)
def test_unmatched_versions_pass_through(version):
    assert normalize("github.com/org/repo", version) == version


def test_unmatched_versions_pass_through_for_nested_paths():
    # not a three-part semantic version, so no path prefix either
    assert normalize("github.com/org/repo/sub", "feature-branch") == "feature-branch"
    assert normalize("github.com/org/repo/sub", "v1.2.3-rc.1") == "v1.2.3-rc.1"


def test_short_pseudo_version_incompatible():
    assert normalize("github.com/org/repo", "v2.0.0-pre-0123456789ab+incompatible") == "0123456789ab"


def test_three_segment_paths_never_prefixed():
    assert normalize("github.com/org/repo", "v1.2.3") == "v1.2.3"


def test_normalize_is_deterministic():
    args = ("k8s.io/client-go/tools/cache", "v0.17.0")
    assert normalize(*args) == normalize(*args) == "cache/v0.17.0"
