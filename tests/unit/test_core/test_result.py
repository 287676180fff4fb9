# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import pytest

from kvm_persistent_net.core.exceptions import DiscoveryError, ErrorKind
from kvm_persistent_net.core.result import Result


@pytest.mark.unit
class TestResult:
    def test_success(self):
        r = Result.success([1, 2])
        assert r.ok
        assert r.error is None
        assert r.value == [1, 2]

    def test_success_with_none_value(self):
        assert Result.success(None).ok

    def test_failure(self):
        err = DiscoveryError(msg="none", kind=ErrorKind.NO_DEVICES_FOUND)
        r = Result.failure(err)

        assert not r.ok
        assert r.error is err
        assert r.value is None
