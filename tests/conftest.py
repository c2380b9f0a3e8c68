"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

PACKAGE_JSON = """\
{
  "name": "demo",
  "version": "1.0.0",
  "scripts": {
    "dev": "vite",
    "tag": "lovable-tagger --watch"
  },
  "dependencies": {
    "react": "^18.2.0"
  },
  "devDependencies": {
    "lovable-tagger": "^1.0.0",
    "vite": "^5.0.0"
  }
}
"""

VITE_CONFIG = """\
import { defineConfig } from "vite";
import react from "@vitejs/plugin-react-swc";
import { componentTagger } from "lovable-tagger";

export default defineConfig(({ mode }) => ({
  plugins: [react(), mode === "development" && componentTagger()].filter(Boolean),
}));
"""

APP_TSX = """\
import { useState } from "react";
import { lovableApi } from "@lovable/sdk";

// @lovable component
export default function App() {
  const data = lovableApi.fetch("/items");
  fetch("https://events.lovable.dev/track");
  return <div data-lov-id="app-root" className="app">{data}</div>;
}
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Keep the user's real config dir and env out of every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    for var in ("SOVEREIGN_MIN_SCORE", "SOVEREIGN_MAX_FILE_SIZE", "SOVEREIGN_REGISTRY"):
        monkeypatch.delenv(var, raising=False)
    return config_home


@pytest.fixture
def lovable_files() -> dict[str, str | bytes]:
    return {
        "package.json": PACKAGE_JSON,
        "vite.config.ts": VITE_CONFIG,
        "src/App.tsx": APP_TSX,
        "lovable.config.json": '{"projectId": "abc123"}\n',
        "public/logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
    }


@pytest.fixture
def clean_files() -> dict[str, str | bytes]:
    return {
        "src/main.ts": "export const answer = 42;\n",
        "README.md": "# Demo\n\nA plain project.\n",
    }


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def lovable_project(tmp_path: Path, lovable_files) -> Path:
    return write_tree(tmp_path / "project", lovable_files)


@pytest.fixture
def clean_project(tmp_path: Path, clean_files) -> Path:
    return write_tree(tmp_path / "project", clean_files)
