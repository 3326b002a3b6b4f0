"""Shared pytest fixtures: a miniature source project and its scaffolded sibling."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import structlog

from scaffold_migrator.config import MigrationSettings
from scaffold_migrator.manifest import PackageManifest

SOURCE_PACKAGE = {
    "name": "bops",
    "dependencies": {
        "axios": "^0.21.1",
        "dayjs": "^1.10.4",
        "lodash": "^4.17.21",
        "mobx": "^5.15.7",
        "react": "^16.13.1",
        "react-intl-universal": "^2.4.2",
    },
    "devDependencies": {
        "@types/lodash": "^4.14.168",
        "dayjs": "^1.11.0",
        "typescript": "^4.1.3",
    },
}

DEST_PACKAGE = {
    "name": "new-app",
    "dependencies": {"react": "^17.0.2"},
    "scripts": {"start": "react-scripts start"},
}

SOURCE_FILES = {
    "src/stores/index.ts": (
        "import { UserStore } from './user';\n"
        "export * from './shared';\n"
        "\n"
        "export default { user: new UserStore() };\n"
    ),
    "src/stores/user.ts": (
        "import { observable } from 'mobx';\n"
        "import request from '../utils/ajax';\n"
        "\n"
        "export class UserStore {\n"
        "    @observable name = '';\n"
        "\n"
        "    load() {\n"
        "        return request('/api/user');\n"
        "    }\n"
        "}\n"
    ),
    "src/stores/shared/index.ts": "export const shared = 1;\n",
    "src/utils/ajax.ts": (
        "import axios from 'axios';\n"
        "\n"
        "export default function request(url: string) {\n"
        "    return axios.get(url);\n"
        "}\n"
    ),
    "src/router/router.js": "export default [];\n",
    "src/pages/Home/index.tsx": (
        "import React from 'react';\n"
        "import get from 'lodash/get';\n"
        "import intl from 'react-intl-universal';\n"
        "import { Header } from '../../components/Header';\n"
        "import logo from './logo.svg';\n"
        "import './style.less';\n"
        "\n"
        "export default function Home(props: any) {\n"
        "    return (\n"
        "        <div>\n"
        "            <Header title={intl.get('home')} />\n"
        "            {get(props, 'x')}\n"
        "            <img src={logo} />\n"
        "        </div>\n"
        "    );\n"
        "}\n"
    ),
    "src/pages/Home/logo.svg": "<svg></svg>\n",
    "src/pages/Home/style.less": ".home { color: red; }\n",
    "src/components/Header.tsx": (
        "import React from 'react';\n"
        "import dayjs from 'dayjs';\n"
        "\n"
        "export const Header = ({ title }: { title: string }) => (\n"
        "    <h1>\n"
        "        {title} {dayjs().year()}\n"
        "    </h1>\n"
        ");\n"
    ),
}

ROUTER_CONFIG = """\
import { lazy } from 'react';

const Welcome = lazy(() => import('../pages/Welcome'));

export const routes = [
    { path: '/', component: Welcome },
];

export default routes;
"""


def write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "bops"
    write_files(root, SOURCE_FILES)
    (root / "package.json").write_text(json.dumps(SOURCE_PACKAGE, indent=2))
    return root


@pytest.fixture
def dest_root(tmp_path: Path) -> Path:
    root = tmp_path / "new-app"
    write_files(root, {"src/router/config.ts": ROUTER_CONFIG})
    (root / "package.json").write_text(json.dumps(DEST_PACKAGE, indent=2))
    return root


@pytest.fixture
def settings(source_root: Path, dest_root: Path) -> MigrationSettings:
    return MigrationSettings(source_root=source_root, dest_project="new-app", dest_root=dest_root)


@pytest.fixture
def source_manifest(settings: MigrationSettings) -> PackageManifest:
    return PackageManifest.load(settings.source_manifest_path)


@pytest.fixture
def dest_manifest(settings: MigrationSettings) -> PackageManifest:
    return PackageManifest.load(settings.dest_manifest_path)


@pytest.fixture
def write():
    """Write ``{relative_path: content}`` under a root directory."""
    return write_files
