"""End-to-end tests for Migrator: external commands mocked."""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from scaffold_migrator.exceptions import MigrationConfigError, SourceFileNotFoundError
from scaffold_migrator.models import RouteDescriptor
from scaffold_migrator.orchestrator import Migrator, load_route_descriptors

HOME = RouteDescriptor(routePath="/home", componentPath="../pages/Home")
HOME_SRC = "{ path: '/home', component: lazy(() => import('../pages/Home')) }"


class TestLoadRouteDescriptors:
    def test_valid(self, tmp_path: Path):
        path = tmp_path / "migration.config.json"
        path.write_text(json.dumps([
            {"routePath": "/a", "componentPath": "../pages/A"},
            {"routePath": "/b", "componentPath": "../pages/B.tsx"},
        ]))
        routes = load_route_descriptors(path)
        assert [r.route_path for r in routes] == ["/a", "/b"]
        assert routes[1].component_path == "../pages/B.tsx"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(MigrationConfigError, match="not found"):
            load_route_descriptors(tmp_path / "migration.config.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text("[{")
        with pytest.raises(MigrationConfigError, match="Invalid JSON"):
            load_route_descriptors(path)

    def test_missing_field(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps([{"routePath": "/a"}]))
        with pytest.raises(MigrationConfigError):
            load_route_descriptors(path)

    def test_not_a_list(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"routePath": "/a", "componentPath": "x"}))
        with pytest.raises(MigrationConfigError):
            load_route_descriptors(path)

    def test_empty_component_rejected(self, tmp_path: Path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps([{"routePath": "/a", "componentPath": "  "}]))
        with pytest.raises(MigrationConfigError):
            load_route_descriptors(path)


class TestMigratorRun:
    def test_full_migration(self, settings):
        result = Migrator(settings).run([HOME], install=False)

        dest = settings.dest_root
        # store entry and route component graphs
        assert (dest / "src/stores/user.ts").is_file()
        assert (dest / "src/pages/Home/index.tsx").is_file()
        assert (dest / "src/components/Header.tsx").is_file()

        # routes
        assert result.routes_appended == 1
        config = (dest / "src/router/config.ts").read_text()
        assert f"    {HOME_SRC},\n];" in config
        assert config.startswith("import { lazy } from 'react';\n")

        # manifest
        data = json.loads((dest / "package.json").read_text())
        assert data["dependencies"]["react"] == "^17.0.2"
        assert data["dependencies"]["lodash"] == "^4.17.21"
        assert data["dependencies"]["mobx"] == "^5.15.7"
        assert data["eslintConfig"]["extends"] == "@qxwz/eslint-config-react-app"
        assert data["scripts"]["codegen-watch"].startswith("graphql-codegen")

        # env + advisories
        assert (dest / ".env").read_text() == "QBP_LIBRARY=new-app\n"
        assert (dest / "help-ajax.txt").is_file()
        assert (dest / "help-i18n.txt").is_file()

        assert result.install_started is False
        assert result.scaffolded is False

    def test_install_started(self, settings):
        with patch("scaffold_migrator.orchestrator.process.start_install") as mock_install:
            result = Migrator(settings).run([HOME], wait_install=True)
        mock_install.assert_called_once_with(settings, wait=True)
        assert result.install_started is True

    def test_scaffolds_missing_destination(self, settings, tmp_path: Path):
        template = tmp_path / "template"
        shutil.copytree(settings.dest_root, template)
        shutil.rmtree(settings.dest_root)

        def fake_scaffold(s):
            shutil.copytree(template, s.dest_root)

        with patch("scaffold_migrator.orchestrator.process.run_scaffold", side_effect=fake_scaffold) as mock_scaffold:
            result = Migrator(settings).run([HOME], install=False)

        mock_scaffold.assert_called_once_with(settings)
        assert result.scaffolded is True
        assert (settings.dest_root / "src/pages/Home/index.tsx").is_file()

    def test_missing_destination_without_scaffold(self, settings):
        shutil.rmtree(settings.dest_root)
        with pytest.raises(MigrationConfigError, match="scaffolding is disabled"):
            Migrator(settings).run([HOME], scaffold=False, install=False)

    def test_unresolvable_component(self, settings):
        missing = RouteDescriptor(routePath="/gone", componentPath="../pages/Gone")
        with pytest.raises(SourceFileNotFoundError):
            Migrator(settings).run([missing], install=False)

    def test_rerun_is_idempotent(self, settings):
        Migrator(settings).run([], install=False)
        manifest_before = (settings.dest_root / "package.json").read_text()

        result = Migrator(settings).run([], install=False)

        assert result.walk.copied == []
        assert result.walk.packages_added == {}
        assert (settings.dest_root / "package.json").read_text() == manifest_before
        assert (settings.dest_root / ".env").read_text() == "QBP_LIBRARY=new-app\n"

    def test_router_without_routes_left_unchanged(self, settings):
        config = settings.dest_router_config_path
        config.write_text("export default [];\n")
        result = Migrator(settings).run([HOME], install=False)
        assert result.routes_appended is None
        assert config.read_text() == "export default [];\n"
