"""Tests for extracting the steamcmd credential bundle."""

import base64
import binascii
import zipfile

import pytest

from steamdeploy.lib.errors import ConfigurationError, ExitCode, ExtractionError
from steamdeploy.lib.steam.auth import SteamAuthTask
from tests.conftest import encode_zip, make_zip


class TestSteamAuthTask:
    """Tests for SteamAuthTask.execute."""

    def test_extracts_config_vdf(self, config, stream, context):
        environ = {"SteamConfigVdf": encode_zip({"config.vdf": b"abc"})}
        task = SteamAuthTask(config, stream, environ=environ)

        written = task.execute(context)

        output = config.config_dir / "config.vdf"
        assert written == [output]
        assert output.read_bytes() == b"abc"
        assert context.build_products == {output}

    def test_one_file_per_entry_with_identical_bytes(self, config, stream, context):
        entries = {
            "config.vdf": b"\"InstallConfigStore\" {}",
            "ssfn1234": bytes(range(256)),
            "nested/deep/loginusers.vdf": b"users",
        }
        environ = {"SteamConfigVdf": encode_zip(entries)}

        written = SteamAuthTask(config, stream, environ=environ).execute(context)

        assert len(written) == len(entries)
        for name, data in entries.items():
            assert (config.config_dir / name).read_bytes() == data

    def test_directory_entries_are_skipped(self, config, stream, context):
        environ = {"SteamConfigVdf": encode_zip({"emptydir/": b"", "config.vdf": b"abc"})}

        written = SteamAuthTask(config, stream, environ=environ).execute(context)

        assert written == [config.config_dir / "config.vdf"]
        assert not (config.config_dir / "emptydir").exists()

    def test_overwrites_existing_files(self, config, stream, context):
        config.config_dir.mkdir(parents=True)
        (config.config_dir / "config.vdf").write_bytes(b"stale")
        environ = {"SteamConfigVdf": encode_zip({"config.vdf": b"fresh"})}

        SteamAuthTask(config, stream, environ=environ).execute(context)

        assert (config.config_dir / "config.vdf").read_bytes() == b"fresh"

    def test_line_wrapped_value(self, config, stream, context):
        bundle = make_zip({"config.vdf": b"abc", "ssfn1234": bytes(range(256)) * 4})
        environ = {"SteamConfigVdf": base64.encodebytes(bundle).decode("ascii")}
        assert "\n" in environ["SteamConfigVdf"].strip()

        SteamAuthTask(config, stream, environ=environ).execute(context)

        assert (config.config_dir / "config.vdf").read_bytes() == b"abc"

    def test_whitespace_only_value_counts_as_unset(self, config, stream, context):
        with pytest.raises(ConfigurationError):
            SteamAuthTask(config, stream, environ={"SteamConfigVdf": " \n\t"}).execute(context)

    def test_custom_env_var_name(self, config, stream, context):
        environ = {"BuildAccountVdf": encode_zip({"config.vdf": b"abc"})}
        task = SteamAuthTask(config, stream, config_vdf_env_var="BuildAccountVdf", environ=environ)

        task.execute(context)

        assert (config.config_dir / "config.vdf").exists()

    def test_reads_os_environ_by_default(self, config, stream, context, monkeypatch):
        monkeypatch.setenv("SteamConfigVdf", encode_zip({"config.vdf": b"abc"}))

        SteamAuthTask(config, stream).execute(context)

        assert (config.config_dir / "config.vdf").read_bytes() == b"abc"

    @pytest.mark.parametrize("environ", [{}, {"SteamConfigVdf": ""}])
    def test_missing_variable_fails_before_filesystem_access(self, config, stream, context, environ):
        with pytest.raises(ConfigurationError, match="SteamConfigVdf not set"):
            SteamAuthTask(config, stream, environ=environ).execute(context)

        assert not config.content_builder_dir.exists()

    def test_malformed_base64(self, config, stream, context):
        environ = {"SteamConfigVdf": "not base64!!"}

        with pytest.raises(ExtractionError, match="Failed extracting steam config.vdf") as exc_info:
            SteamAuthTask(config, stream, environ=environ).execute(context)

        assert isinstance(exc_info.value.__cause__, binascii.Error)
        assert exc_info.value.exit_code == ExitCode.ERROR_UNKNOWN_DEPLOY_FAILURE
        assert not config.config_dir.exists()

    def test_not_a_zip(self, config, stream, context):
        environ = {"SteamConfigVdf": base64.b64encode(b"plain text").decode("ascii")}

        with pytest.raises(ExtractionError) as exc_info:
            SteamAuthTask(config, stream, environ=environ).execute(context)

        assert isinstance(exc_info.value.__cause__, zipfile.BadZipFile)

    def test_entry_outside_config_dir(self, config, stream, context):
        environ = {"SteamConfigVdf": encode_zip({"../escape.vdf": b"x"})}

        with pytest.raises(ExtractionError):
            SteamAuthTask(config, stream, environ=environ).execute(context)

        assert not (config.content_builder_dir / "escape.vdf").exists()

    def test_logs_each_extracted_entry(self, config, stream, context, redis_client):
        environ = {"SteamConfigVdf": encode_zip({"config.vdf": b"abc"})}

        SteamAuthTask(config, stream, environ=environ).execute(context)

        lines = [call.args[1]["line"] for call in redis_client.xadd.call_args_list]
        assert lines[0] == "Creating SteamCmd config.vdf from environment"
        assert any(line.startswith("Extracting config.vdf to ") for line in lines)
