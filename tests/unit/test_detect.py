"""Unit tests for host platform detection."""

import pytest

from dotboot.platform.detect import Platform, classify, detect, gather_facts, parse_os_release


def write_os_release(tmp_path, content):
    path = tmp_path / "os-release"
    path.write_text(content)
    return path


class TestParseOsRelease:
    """Tests for /etc/os-release parsing."""

    def test_parses_quoted_and_bare_values(self):
        fields = parse_os_release(
            'NAME="Ubuntu"\n'
            "ID=ubuntu\n"
            "VERSION_ID='22.04'\n"
        )
        assert fields["NAME"] == "Ubuntu"
        assert fields["ID"] == "ubuntu"
        assert fields["VERSION_ID"] == "22.04"

    def test_skips_comments_and_blank_lines(self):
        fields = parse_os_release("# comment\n\nID=fedora\nnot a field\n")
        assert fields == {"ID": "fedora"}


class TestClassify:
    """Tests for mapping host data to a platform family."""

    def test_darwin_is_macos(self):
        assert classify("Darwin", None) == Platform.MACOS

    @pytest.mark.parametrize("dist_id", ["ubuntu", "debian"])
    def test_debian_family(self, dist_id):
        assert classify("Linux", {"ID": dist_id}) == Platform.DEBIAN

    @pytest.mark.parametrize("dist_id", ["fedora", "rhel", "centos"])
    def test_redhat_family(self, dist_id):
        assert classify("Linux", {"ID": dist_id}) == Platform.REDHAT

    def test_other_distribution_is_unknown(self):
        assert classify("Linux", {"ID": "arch"}) == Platform.UNKNOWN

    def test_missing_os_release_is_unknown(self):
        assert classify("Linux", None) == Platform.UNKNOWN

    def test_other_kernel_is_unknown(self):
        assert classify("FreeBSD", {}) == Platform.UNKNOWN

    def test_id_like_is_not_used(self):
        """Only ID decides the family."""
        assert classify("Linux", {"ID": "linuxmint", "ID_LIKE": "ubuntu debian"}) == Platform.UNKNOWN


class TestDetect:
    """Tests for detect() and gather_facts() against files on disk."""

    def test_detects_ubuntu(self, tmp_path):
        path = write_os_release(tmp_path, 'ID=ubuntu\nPRETTY_NAME="Ubuntu 22.04 LTS"\n')
        assert detect(system="Linux", os_release_path=path) == Platform.DEBIAN

    def test_detects_quoted_centos(self, tmp_path):
        path = write_os_release(tmp_path, 'ID="centos"\n')
        assert detect(system="Linux", os_release_path=path) == Platform.REDHAT

    def test_missing_file_is_unknown(self, tmp_path):
        assert detect(system="Linux", os_release_path=tmp_path / "nope") == Platform.UNKNOWN

    def test_darwin_ignores_os_release(self, tmp_path):
        path = write_os_release(tmp_path, "ID=ubuntu\n")
        assert detect(system="Darwin", os_release_path=path) == Platform.MACOS

    def test_gather_facts_fields(self, tmp_path):
        path = write_os_release(
            tmp_path,
            'ID=fedora\nVERSION_ID=39\nPRETTY_NAME="Fedora Linux 39"\n',
        )
        facts = gather_facts(system="Linux", os_release_path=path)
        assert facts.platform == Platform.REDHAT
        assert facts.distribution == "fedora"
        assert facts.distribution_version == "39"
        assert facts.describe() == "redhat (Fedora Linux 39)"

    def test_describe_unknown(self, tmp_path):
        facts = gather_facts(system="Linux", os_release_path=tmp_path / "nope")
        assert facts.describe() == "unknown"


class TestPlatform:
    """Tests for the Platform enum."""

    def test_labels(self):
        assert Platform.MACOS.label == "macOS"
        assert Platform.DEBIAN.label == "Ubuntu/Debian"
        assert Platform.REDHAT.label == "Fedora/RHEL"

    def test_known(self):
        assert Platform.DEBIAN.known
        assert not Platform.UNKNOWN.known
