"""Tests for stream capabilities, streams and stream configuration."""

import pytest

from fileurl import (
    Capabilities,
    File,
    FileStreamByteReader,
    FileStreamCharReader,
    FileStreamCharWriter,
    FileUrl,
    MissingCapabilityError,
    StreamConfig,
    configure,
    current_capabilities,
    default_capabilities,
    use_capabilities,
)


class SpecialUrl(FileUrl):
    """FileUrl subclass used to check inherited lookups."""


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestRegistry:
    """Test (url type, element kind) resolution."""

    def test_default_resolves_both_kinds(self):
        """The default registry has byte and char readers and writers."""
        registry = default_capabilities()
        assert registry.reader(FileUrl, bytes).kind is bytes
        assert registry.writer(FileUrl, bytes).kind is bytes
        assert registry.reader(FileUrl, str).kind is str
        assert registry.writer(FileUrl, str).kind is str

    def test_subclass_inherits(self):
        """Lookups walk the URL type's MRO."""
        registry = default_capabilities()
        assert registry.reader(SpecialUrl, bytes) is registry.reader(FileUrl, bytes)

    def test_subclass_override(self):
        """A registration for a subclass wins over its base."""
        registry = default_capabilities()
        special = FileStreamByteReader()
        registry.register_reader(SpecialUrl, special)
        assert registry.reader(SpecialUrl, bytes) is special
        assert registry.reader(FileUrl, bytes) is not special

    def test_missing_reader(self):
        """An empty registry raises MissingCapabilityError."""
        with pytest.raises(MissingCapabilityError, match="bytes reader"):
            Capabilities().reader(FileUrl, bytes)

    def test_missing_writer_is_lookup_error(self):
        """MissingCapabilityError is a LookupError."""
        with pytest.raises(LookupError):
            Capabilities().writer(FileUrl, str)

    def test_copy_is_independent(self):
        """Registering on a copy leaves the original untouched."""
        original = default_capabilities()
        clone = original.copy()
        replacement = FileStreamByteReader()
        clone.register_reader(FileUrl, replacement)
        assert original.reader(FileUrl, bytes) is not replacement

    def test_current_defaults(self):
        """Outside use_capabilities the shared default is returned."""
        assert current_capabilities() is current_capabilities()
        assert current_capabilities().reader(FileUrl, bytes).kind is bytes

    def test_use_capabilities_scopes(self):
        """use_capabilities installs a registry only inside the block."""
        registry = Capabilities()
        before = current_capabilities()
        with use_capabilities(registry) as active:
            assert active is registry
            assert current_capabilities() is registry
        assert current_capabilities() is before


# ---------------------------------------------------------------------------
# Streams through FileUrl
# ---------------------------------------------------------------------------


class TestStreams:
    """Test opening FileUrls as streams."""

    def test_char_round_trip(self, tmp_path):
        """Text written with the char writer reads back identically."""
        url = File(tmp_path) / "notes.txt"
        with url.output(str) as out:
            out.write("héllo\nwörld\n")
        with url.input(str) as src:
            assert src.read() == "héllo\nwörld\n"

    def test_byte_append(self, tmp_path):
        """append=True adds to the end of the file."""
        url = File(tmp_path) / "log.bin"
        with url.output() as out:
            out.write(b"one,")
        with url.output(append=True) as out:
            out.write(b"two")
        assert (tmp_path / "log.bin").read_bytes() == b"one,two"

    def test_input_iterates_chunks(self, tmp_path):
        """Iterating an input yields chunks of at most buffer_size."""
        (tmp_path / "data").write_bytes(b"abcdefghij")
        reader = FileStreamByteReader(configure(buffer_size=4))
        with reader.input(File(tmp_path) / "data") as src:
            assert list(src) == [b"abcd", b"efgh", b"ij"]

    def test_closed_input_rejects_reads(self, tmp_path):
        """Reading after close raises ValueError; close is idempotent."""
        (tmp_path / "data").write_bytes(b"x")
        src = (File(tmp_path) / "data").input()
        src.close()
        src.close()
        assert src.closed is True
        with pytest.raises(ValueError):
            src.read()

    def test_closed_output_rejects_writes(self, tmp_path):
        """Writing after close raises ValueError."""
        out = (File(tmp_path) / "data").output()
        out.close()
        with pytest.raises(ValueError):
            out.write(b"x")

    def test_char_pump_counts_characters(self, tmp_path):
        """Pumping characters returns the character count."""
        (tmp_path / "src.txt").write_text("ünïcode", encoding="utf-8")
        reader = FileStreamCharReader()
        count = reader.pump(
            File(tmp_path) / "src.txt", File(tmp_path) / "dest.txt", FileStreamCharWriter()
        )
        assert count == 7
        assert (tmp_path / "dest.txt").read_text(encoding="utf-8") == "ünïcode"

    def test_configured_encoding(self, tmp_path):
        """Char capabilities honour the configured encoding."""
        config = configure(encoding="latin-1")
        url = File(tmp_path) / "latin.txt"
        with FileStreamCharWriter(config).output(url) as out:
            out.write("café")
        assert (tmp_path / "latin.txt").read_bytes() == "café".encode("latin-1")

    def test_missing_file_raises(self, tmp_path):
        """Opening a missing file for input raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            (File(tmp_path) / "nope").input()

    def test_unregistered_kind(self):
        """Registering an unsupported element kind is rejected."""
        reader = FileStreamByteReader()
        reader.kind = int
        with pytest.raises(ValueError):
            Capabilities().register_reader(FileUrl, reader)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfigure:
    """Test StreamConfig construction."""

    def test_defaults(self):
        """configure() with no arguments matches StreamConfig()."""
        assert configure() == StreamConfig()

    def test_unexpected_argument(self):
        """Unknown keys raise ValueError."""
        with pytest.raises(ValueError, match="Unexpected arguments"):
            configure(compression="gzip")

    def test_bad_buffer_size(self):
        """Non-positive buffer sizes raise ValueError."""
        with pytest.raises(ValueError):
            configure(buffer_size=0)

    def test_bad_newline(self):
        """Unsupported newline modes raise ValueError."""
        with pytest.raises(ValueError):
            configure(newline="\t")

    def test_frozen(self):
        """StreamConfig is immutable."""
        config = configure()
        with pytest.raises(AttributeError):
            config.encoding = "ascii"
