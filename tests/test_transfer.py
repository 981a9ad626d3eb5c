"""Tests for kmsctl.services.transfer: downloads, uploads and inline edits."""
import logging
import os
import stat

import pytest

from kmsctl.exceptions import (
    BucketNotFoundError,
    ConfigurationError,
    EditorError,
    InvalidFilterError,
    KmsctlError,
    LocalFileError,
    NoInputError,
)
from kmsctl.models import TransferRequest
from kmsctl.services.transfer import (
    TransferOrchestrator,
    destination_path,
    remote_key,
    run_editor,
)


@pytest.fixture
def orchestrator(s3_ops):
    return TransferOrchestrator(s3_ops)


class TestDestinationPath:
    def test_mirrors_key(self, tmp_path):
        out = str(tmp_path)
        assert destination_path(out, "a/b/c.txt", False) == os.path.join(out, "a", "b", "c.txt")

    def test_flatten_uses_base_name(self, tmp_path):
        out = str(tmp_path)
        assert destination_path(out, "a/b/c.txt", True) == os.path.join(out, "c.txt")

    def test_refuses_escaping_keys(self, tmp_path):
        with pytest.raises(KmsctlError):
            destination_path(str(tmp_path), "../../etc/passwd", False)

    @pytest.mark.parametrize("key", [".", "a/..", "a/b/../.."])
    def test_refuses_keys_resolving_to_output_dir(self, tmp_path, key):
        with pytest.raises(KmsctlError, match="does not resolve to a file"):
            destination_path(str(tmp_path), key, False)


class TestRemoteKey:
    @pytest.mark.parametrize("path, expected", [
        ("certs/tls.pem", "certs/tls.pem"),
        ("./certs/tls.pem", "certs/tls.pem"),
        ("../shared/db.yml", "shared/db.yml"),
        ("/etc/app/db.yml", "etc/app/db.yml"),
    ])
    def test_normalizes_leading_segments(self, path, expected):
        assert remote_key(path, False) == expected

    def test_flatten(self):
        assert remote_key("certs/sub/tls.pem", True) == "tls.pem"


# ── materialize_objects ────────────────────────────────────────────────────


class TestMaterializeObjects:
    def test_writes_selected_files(self, orchestrator, tmp_path, set_objects, set_contents):
        set_objects(["a/", "a/1.txt", "a/b/2.txt"])
        set_contents({"a/1.txt": b"one", "a/b/2.txt": b"two"})
        request = TransferRequest("bkt", paths=["a/"], output_dir=str(tmp_path), perms=0o600)

        written = orchestrator.materialize_objects(request)

        target = tmp_path / "a" / "1.txt"
        assert written == [("a/1.txt", str(target))]
        assert target.read_bytes() == b"one"
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600
        assert not (tmp_path / "a" / "b").exists()

    def test_recursive_flatten(self, orchestrator, tmp_path, set_objects, set_contents):
        set_objects(["a/1.txt", "a/b/2.txt"])
        set_contents({"a/1.txt": b"one", "a/b/2.txt": b"two"})
        request = TransferRequest("bkt", paths=["/a/"], recursive=True, flatten=True,
                                  output_dir=str(tmp_path))

        orchestrator.materialize_objects(request)

        assert (tmp_path / "1.txt").read_bytes() == b"one"
        assert (tmp_path / "2.txt").read_bytes() == b"two"

    def test_filter_and_callback(self, orchestrator, tmp_path, set_objects, set_contents):
        set_objects(["a.txt", "a.bin"])
        set_contents({"a.txt": b"text", "a.bin": b"bin"})
        seen = []
        request = TransferRequest("bkt", filter_pattern=r"\.txt$", output_dir=str(tmp_path))

        orchestrator.materialize_objects(request, callback=lambda k, d, c: seen.append((k, c)))

        assert seen == [("a.txt", b"text")]
        assert not (tmp_path / "a.bin").exists()

    def test_overwrites_existing_files(self, orchestrator, tmp_path, set_objects, set_contents):
        (tmp_path / "db.yml").write_bytes(b"stale content that is longer")
        set_objects(["db.yml"])
        set_contents({"db.yml": b"fresh"})

        orchestrator.materialize_objects(TransferRequest("bkt", output_dir=str(tmp_path)))

        assert (tmp_path / "db.yml").read_bytes() == b"fresh"

    def test_bad_filter_fails_before_any_call(self, orchestrator, s3_client, tmp_path):
        out = tmp_path / "out"
        request = TransferRequest("bkt", filter_pattern="([", output_dir=str(out))

        with pytest.raises(InvalidFilterError):
            orchestrator.materialize_objects(request)

        s3_client.get_paginator.assert_not_called()
        s3_client.get_object.assert_not_called()
        assert not out.exists()


def test_read_objects_in_order(orchestrator, set_contents):
    set_contents({"a": b"1", "b": b"2"})
    assert list(orchestrator.read_objects("bkt", ["b", "a"])) == [("b", b"2"), ("a", b"1")]


# ── push_files ─────────────────────────────────────────────────────────────


@pytest.fixture
def local_tree(tmp_path, monkeypatch):
    (tmp_path / "certs" / "sub").mkdir(parents=True)
    (tmp_path / "certs" / "a.pem").write_bytes(b"A")
    (tmp_path / "certs" / "sub" / "b.pem").write_bytes(b"B")
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestPushFiles:
    def test_uploads_tree_encrypted(self, orchestrator, s3_client, set_buckets, local_tree):
        set_buckets("bkt")
        request = TransferRequest("bkt", paths=["certs"], kms_key_id="key-1")

        uploaded = orchestrator.push_files(request)

        assert [key for _, key in uploaded] == ["certs/a.pem", "certs/sub/b.pem"]
        first = s3_client.put_object.call_args_list[0].kwargs
        assert first["Key"] == "certs/a.pem"
        assert first["Body"] == b"A"
        assert first["ServerSideEncryption"] == "aws:kms"
        assert first["SSEKMSKeyId"] == "key-1"

    def test_flatten(self, orchestrator, set_buckets, local_tree):
        set_buckets("bkt")
        request = TransferRequest("bkt", paths=["certs"], flatten=True, kms_key_id="key-1")
        assert [key for _, key in orchestrator.push_files(request)] == ["a.pem", "b.pem"]

    def test_missing_bucket_checked_before_reading(self, orchestrator, s3_client, set_buckets,
                                                   local_tree):
        set_buckets("other")
        request = TransferRequest("bkt", paths=["does-not-exist"], kms_key_id="key-1")

        with pytest.raises(BucketNotFoundError):
            orchestrator.push_files(request)
        s3_client.put_object.assert_not_called()

    def test_no_paths(self, orchestrator, set_buckets):
        set_buckets("bkt")
        with pytest.raises(NoInputError):
            orchestrator.push_files(TransferRequest("bkt", kms_key_id="key-1"))

    def test_kms_key_required(self, orchestrator, set_buckets, local_tree):
        set_buckets("bkt")
        with pytest.raises(ConfigurationError):
            orchestrator.push_files(TransferRequest("bkt", paths=["certs"]))

    def test_missing_path_aborts(self, orchestrator, s3_client, set_buckets, local_tree):
        set_buckets("bkt")
        request = TransferRequest("bkt", paths=["certs/a.pem", "nope"], kms_key_id="key-1")

        with pytest.raises(KmsctlError, match="failed to process path: nope"):
            orchestrator.push_files(request)
        assert s3_client.put_object.call_count == 1

    def test_unreadable_file_is_reported(self, orchestrator, s3_client, set_buckets, local_tree,
                                         monkeypatch):
        set_buckets("bkt")

        def denied(path):
            raise PermissionError(13, "Permission denied", path)
        monkeypatch.setattr("kmsctl.services.transfer.read_file", denied)
        request = TransferRequest("bkt", paths=["certs/a.pem"], kms_key_id="key-1")

        with pytest.raises(LocalFileError, match="failed to read the file: certs/a.pem") as exc:
            orchestrator.push_files(request)
        assert isinstance(exc.value.orig_exc, PermissionError)
        s3_client.put_object.assert_not_called()


# ── edit ───────────────────────────────────────────────────────────────────


class FakeEditor:
    """Records the edited path and optionally rewrites the file."""

    def __init__(self, new_content=None, fail=False):
        self.new_content = new_content
        self.fail = fail
        self.paths = []

    def __call__(self, editor, path):
        self.paths.append(path)
        if self.new_content is not None:
            with open(path, "wb") as f:
                f.write(self.new_content)
        if self.fail:
            raise EditorError("the editor: fake exited with status 1")


class TestEditRemoteFile:
    def test_changed_content_is_uploaded_with_current_key(self, s3_ops, s3_client, set_contents):
        set_contents({"db.yml": b"old"}, kms_key_id="arn:current")
        editor = FakeEditor(b"new")

        updated = TransferOrchestrator(s3_ops, editor).edit_remote_file("bkt", "db.yml", "fake")

        assert updated is True
        s3_client.put_object.assert_called_once_with(
            Bucket="bkt", Key="db.yml", Body=b"new",
            ServerSideEncryption="aws:kms", SSEKMSKeyId="arn:current",
        )
        assert not os.path.exists(editor.paths[0])

    def test_explicit_key_overrides_current(self, s3_ops, s3_client, set_contents):
        set_contents({"db.yml": b"old"})
        orchestrator = TransferOrchestrator(s3_ops, FakeEditor(b"new"))

        orchestrator.edit_remote_file("bkt", "db.yml", "fake", kms_key_id="key-override")

        assert s3_client.put_object.call_args.kwargs["SSEKMSKeyId"] == "key-override"

    def test_unchanged_content_is_not_uploaded(self, s3_ops, s3_client, set_contents):
        set_contents({"db.yml": b"same"})
        editor = FakeEditor()

        updated = TransferOrchestrator(s3_ops, editor).edit_remote_file("bkt", "db.yml", "fake")

        assert updated is False
        s3_client.put_object.assert_not_called()
        assert not os.path.exists(editor.paths[0])

    def test_unchanged_content_is_logged(self, s3_ops, set_contents, caplog):
        set_contents({"db.yml": b"same"})

        with caplog.at_level(logging.INFO, logger="kmsctl"):
            TransferOrchestrator(s3_ops, FakeEditor()).edit_remote_file("bkt", "db.yml", "fake")

        assert "No changes made to s3://bkt/db.yml" in caplog.text

    def test_temp_file_removed_when_editor_fails(self, s3_ops, s3_client, set_contents):
        set_contents({"config/db.yml": b"old"})
        editor = FakeEditor(fail=True)

        with pytest.raises(EditorError):
            TransferOrchestrator(s3_ops, editor).edit_remote_file("bkt", "config/db.yml", "fake")

        assert os.path.basename(editor.paths[0]).startswith("db.yml.")
        assert not os.path.exists(editor.paths[0])
        s3_client.put_object.assert_not_called()

    def test_unknown_key_without_override(self, s3_ops, set_contents):
        set_contents({"db.yml": b"old"}, kms_key_id=None)
        orchestrator = TransferOrchestrator(s3_ops, FakeEditor(b"new"))

        with pytest.raises(ConfigurationError):
            orchestrator.edit_remote_file("bkt", "db.yml", "fake")


class TestEditLocalFile:
    def test_runs_editor_on_path(self, s3_ops, tmp_path):
        target = tmp_path / "db.yml"
        target.write_text("x")
        editor = FakeEditor()

        TransferOrchestrator(s3_ops, editor).edit_local_file(str(target), "fake")

        assert editor.paths == [str(target)]

    def test_missing_file(self, s3_ops, tmp_path):
        with pytest.raises(KmsctlError):
            TransferOrchestrator(s3_ops, FakeEditor()).edit_local_file(
                str(tmp_path / "missing"), "fake"
            )


class TestRunEditor:
    def test_missing_binary(self, tmp_path):
        with pytest.raises(EditorError, match="unable to run the editor"):
            run_editor("kmsctl-no-such-editor-binary", str(tmp_path / "f"))

    def test_non_zero_exit(self, tmp_path):
        with pytest.raises(EditorError, match="exited with status 1"):
            run_editor("false", str(tmp_path / "f"))

    def test_editor_with_arguments(self, tmp_path):
        target = tmp_path / "f"
        target.write_text("x")
        run_editor("true --wait", str(target))
