import pytest

from patchkit.core.config.catalog_loader import (
    default_catalog_path,
    load_catalog,
    parse_catalog,
)
from patchkit.core.patches.errors import CatalogError, DuplicateModuleError
from patchkit.core.patches.module import PatchOperation, PatchStatus
from patchkit.core.patches.runner import run_patches


class TestCatalogLoader:

    def test_load_catalog_basic(self, tmp_path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text(
            """
modules:
  - name: bump
    description: Bump the return value
    operations:
      - pattern: 'return 1\\}'
        replacement: 'return 2}'
      - pattern: '(\\w+)\\(A\\)'
        replacement: '\\1(B)'
"""
        )

        registry = load_catalog(str(catalog))

        assert registry.frozen
        module = registry.lookup("bump")
        assert module.description == "Bump the return value"
        assert module.operations == (
            PatchOperation(r"return 1\}", "return 2}"),
            PatchOperation(r"(\w+)\(A\)", r"\1(B)"),
        )

    def test_extends_order(self, tmp_path):
        (tmp_path / "base.yaml").write_text(
            "modules:\n"
            "  - name: base_mod\n"
            "    operations:\n"
            "      - {pattern: 'a', replacement: 'b'}\n"
        )
        child = tmp_path / "child.yaml"
        child.write_text(
            "extends:\n"
            "  - base.yaml\n"
            "modules:\n"
            "  - name: child_mod\n"
            "    operations:\n"
            "      - {pattern: 'c', replacement: 'd'}\n"
        )

        registry = load_catalog(str(child))

        assert registry.names() == ["base_mod", "child_mod"]
        assert registry.lookup("base_mod").description == ""

    def test_extends_duplicate_name(self, tmp_path):
        entry = "modules:\n  - name: same\n    operations:\n      - {pattern: 'a', replacement: 'b'}\n"
        (tmp_path / "base.yaml").write_text(entry)
        child = tmp_path / "child.yaml"
        child.write_text("extends: base.yaml\n" + entry)

        with pytest.raises(DuplicateModuleError):
            load_catalog(str(child))

    def test_circular_extends(self, tmp_path):
        (tmp_path / "a.yaml").write_text("extends: [b.yaml]\nmodules: []\n")
        (tmp_path / "b.yaml").write_text("extends: [a.yaml]\nmodules: []\n")

        with pytest.raises(CatalogError, match="Circular"):
            parse_catalog(str(tmp_path / "a.yaml"))

    def test_empty_catalog(self, tmp_path):
        catalog = tmp_path / "empty.yaml"
        catalog.write_text("")

        with pytest.raises(CatalogError, match="is empty or invalid"):
            load_catalog(str(catalog))

    def test_missing_catalog(self, tmp_path):
        with pytest.raises(CatalogError, match="Cannot read catalog"):
            load_catalog(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        catalog = tmp_path / "bad.yaml"
        catalog.write_text("modules: [\n")

        with pytest.raises(CatalogError, match="not valid YAML"):
            load_catalog(str(catalog))

    @pytest.mark.parametrize(
        "body, message",
        [
            ("modules:\n  - description: x\n    operations: [{pattern: a, replacement: b}]\n", "name"),
            ("modules:\n  - name: m\n    operations: []\n", "at least one operation"),
            ("modules:\n  - name: m\n    operations: [{pattern: a}]\n", "string 'pattern'"),
            ("modules:\n  - name: m\n    operations: [[a, b]]\n", "must be a mapping"),
            ("modules: {name: m}\n", "must be a list"),
        ],
    )
    def test_malformed_entries(self, tmp_path, body, message):
        catalog = tmp_path / "bad.yaml"
        catalog.write_text(body)

        with pytest.raises(CatalogError, match=message):
            load_catalog(str(catalog))


class TestDefaultCatalog:
    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PATCHKIT_CATALOG", str(tmp_path / "mine.yaml"))
        assert default_catalog_path() == str(tmp_path / "mine.yaml")

    def test_bundled_modules(self):
        registry = load_catalog()

        assert registry.names() == ["context_limit", "security_context_clean", "temperature_setting"]
        assert len(registry.lookup("security_context_clean").operations) == 2

    def test_bundled_modules_apply(self, tmp_path):
        bundle = tmp_path / "cli.js"
        bundle.write_text(
            'function wO(A){if(A.includes("[1m]"))return 1e6;return 200000}\n'
            "messages:Z,model:E(d.model),temperature:F,system:I,tools:J\n"
            "K],permissionMode:d.mode,promptCategory:Y\n"
        )

        report = run_patches(str(bundle), load_catalog(), ["context_limit", "temperature_setting"])
        patched = bundle.read_text()

        assert report.applied == ["context_limit", "temperature_setting"]
        assert "if(process.env.CLAUDE_CONTEXT_LIMIT)return Number(process.env.CLAUDE_CONTEXT_LIMIT)" in patched
        assert "process.env.CLAUDE_CURRENT_MODE==='plan'&&process.env.CLAUDE_PLAN_TEMPERATURE" in patched
        assert "permissionMode:(process.env.CLAUDE_CURRENT_MODE=d.mode,d.mode)" in patched

        # Patterns were written against the unpatched text.
        again = run_patches(str(bundle), load_catalog(), ["context_limit"], now=lambda: _later())
        assert again.get("context_limit").status == PatchStatus.VALIDATION_FAILED


def _later():
    from datetime import datetime

    return datetime(2099, 1, 1)
