###############################################################################
# Copyright (c) 2025, Advanced Micro Devices, Inc. All rights reserved.
#
# See LICENSE for license information.
###############################################################################

import pytest

from patchkit.core.patches.engine import apply_module
from patchkit.core.patches.errors import ValidationError
from patchkit.core.patches.module import PatchModule
from patchkit.core.patches.validator import find_matches, validate_module

CONTENT = "function foo(A){return 1}\nfunction bar(B){return 2}\n"


class TestValidateModule:
    def test_all_patterns_present(self):
        module = PatchModule.create("m", "", [(r"foo\(A\)", "x"), (r"bar\(B\)", "y")])
        validate_module(module, CONTENT)

    def test_fails_on_first_missing_pattern(self):
        module = PatchModule.create(
            "m",
            "",
            [(r"foo\(A\)", "x"), (r"baz\(C\)", "y"), (r"qux", "z")],
        )

        with pytest.raises(ValidationError) as exc:
            validate_module(module, CONTENT)

        err = exc.value
        assert err.module_name == "m"
        assert err.operation_index == 1
        assert err.pattern_preview == r"baz\(C\)"
        assert "Pattern 2 not found for module 'm': baz\\(C\\)" in str(err)

    def test_fail_fast_reports_earliest_index(self):
        module = PatchModule.create("m", "", [("missing1", "x"), ("missing2", "y")])

        with pytest.raises(ValidationError) as exc:
            validate_module(module, CONTENT)
        assert exc.value.operation_index == 0

    def test_pattern_is_not_anchored(self):
        module = PatchModule.create("m", "", [(r"return 2", "x")])
        validate_module(module, CONTENT)

    def test_pattern_can_span_lines(self):
        module = PatchModule.create("m", "", [(r"return 1\}\nfunction bar", "x")])
        validate_module(module, CONTENT)

    def test_invalid_pattern_is_validation_error(self):
        module = PatchModule.create("m", "", [("foo(", "x")])

        with pytest.raises(ValidationError) as exc:
            validate_module(module, CONTENT)
        assert exc.value.reason.startswith("invalid pattern")

    def test_long_pattern_preview_is_bounded(self):
        module = PatchModule.create("m", "", [("z" * 120, "x")])

        with pytest.raises(ValidationError) as exc:
            validate_module(module, CONTENT)
        assert exc.value.pattern_preview == "z" * 47 + "..."

    def test_order_sensitivity(self):
        # Operation 2 only matches text produced by operation 1.
        module = PatchModule.create(
            "m",
            "",
            [(r"return 1", "return MARKER"), (r"MARKER", "2")],
        )

        with pytest.raises(ValidationError) as exc:
            validate_module(module, CONTENT)
        assert exc.value.operation_index == 1

        # Applied in sequence the dependency is honoured.
        assert "function foo(A){return 2}" in apply_module(module, CONTENT)


class TestFindMatches:
    def test_counts_without_failing_fast(self):
        module = PatchModule.create(
            "m",
            "",
            [("function", "x"), ("missing", "y"), ("return", "z"), ("(", "w")],
        )

        assert find_matches(module, CONTENT) == [2, 0, 2, -1]
