"""Tests for the rubotogen command line"""

import os

import pytest

from rubotogen import main


@pytest.fixture
def settings(tmp_path, api_path):
    path = tmp_path / "rubotogen.yaml"
    path.write_text(f"min_sdk: 10\ntarget_sdk: 19\napi: {api_path}\ndestination: {tmp_path / 'app'}\n")
    return str(path)


class TestCli:
    def test_gen_class(self, settings, tmp_path, capsys):
        code = main(["--config", settings, "gen", "--class", "android.app.Activity", "--name", "RubotoActivity"])
        assert code == 0
        assert (tmp_path / "app" / "src" / "org" / "ruboto" / "RubotoActivity.java").exists()
        assert "Generated" in capsys.readouterr().out

    def test_gen_conflict_fails(self, settings, tmp_path, capsys):
        code = main(["--config", settings, "gen", "--class", "PreferenceActivity", "--name", "Prefs"])
        assert code == 1
        assert "Generation failed" in capsys.readouterr().err
        assert not (tmp_path / "app" / "src").exists()

    def test_gen_force(self, settings, tmp_path):
        code = main(["--config", settings, "gen", "--class", "PreferenceActivity", "--name", "Prefs", "--force"])
        assert code == 0

    def test_core_all(self, settings, tmp_path):
        assert main(["--config", settings, "core"]) == 0
        assert sorted(os.listdir(tmp_path / "app" / "src" / "org" / "ruboto" / "callbacks")) == [
            "RubotoOnClickListener.java",
            "RubotoOnItemClickListener.java",
        ]

    def test_core_keep_going(self, settings, tmp_path, capsys):
        code = main(["--config", settings, "--min-sdk", "4", "core", "--keep-going"])
        assert code == 1
        assert "Generation of RubotoActivity failed" in capsys.readouterr().err
        assert (tmp_path / "app" / "src" / "org" / "ruboto" / "RubotoView.java").exists()

    def test_inheriting(self, settings, tmp_path):
        code = main(["--config", settings, "inheriting", "--kind", "Activity", "--name", "MainActivity"])
        assert code == 0
        assert (tmp_path / "app" / "assets" / "scripts" / "main_activity.rb").exists()

    def test_configuration_error(self, tmp_path, capsys):
        path = tmp_path / "rubotogen.yaml"
        path.write_text("package: com.example\n")
        assert main(["--config", str(path), "core"]) == 2
        assert "Configuration error" in capsys.readouterr().err


class TestInheritingWithoutSdk:
    def test_manifest_without_uses_sdk(self, tmp_path):
        manifest = tmp_path / "AndroidManifest.xml"
        manifest.write_text(
            '<manifest xmlns:android="http://schemas.android.com/apk/res/android" package="com.example.app"/>'
        )
        code = main(["--manifest", str(manifest), "--dest", str(tmp_path / "app"),
                     "inheriting", "--kind", "Service", "--name", "SyncService"])
        assert code == 0
        assert (tmp_path / "app" / "src" / "com" / "example" / "app" / "SyncService.java").exists()

    def test_other_commands_still_need_sdk(self, tmp_path, capsys):
        manifest = tmp_path / "AndroidManifest.xml"
        manifest.write_text('<manifest package="com.example.app"/>')
        assert main(["--manifest", str(manifest), "core"]) == 2
        assert "min_sdk is required" in capsys.readouterr().err
