"""Tests for wallsync package imports and exports."""

from __future__ import annotations


class TestPackageImports:
    """Tests for package imports."""

    def test_import_wallsync(self):
        import wallsync

        assert hasattr(wallsync, "__version__")

    def test_import_core_modules(self):
        from wallsync.core import config, exceptions, logging, output, validation

        assert config is not None
        assert exceptions is not None
        assert validation is not None
        assert output is not None
        assert logging is not None

    def test_import_models(self):
        from wallsync.models import base, progress, upload

        assert base is not None
        assert progress is not None
        assert upload is not None

    def test_import_services(self):
        from wallsync.services import base, delete, naming, presign, storage

        assert base is not None
        assert presign is not None
        assert storage is not None
        assert delete is not None
        assert naming is not None

    def test_import_uploaders(self):
        from wallsync.uploaders import (
            dedup,
            destinations,
            pipeline,
            scheduler,
            selection,
            thumbnails,
            transfer,
            validation,
        )

        assert validation is not None
        assert dedup is not None
        assert selection is not None
        assert destinations is not None
        assert scheduler is not None
        assert transfer is not None
        assert pipeline is not None
        assert thumbnails is not None


class TestPackageExports:
    """Tests for top-level exports."""

    def test_exports(self):
        import wallsync

        for name in wallsync.__all__:
            assert hasattr(wallsync, name), name

    def test_uploaders_exports(self):
        import wallsync.uploaders as uploaders

        for name in uploaders.__all__:
            assert hasattr(uploaders, name), name

    def test_cli_entry_point(self):
        from wallsync.cli.main import cli, main

        assert callable(main)
        assert "upload" in cli.commands
