"""Unit tests for the contextual logger."""

import logging

from vcenter_access.core.logging import ContextualLogger


def test_with_context_merges_dimensions():
    base = ContextualLogger(logging.getLogger("test"), {"connector": "vmware-vcenter"})

    narrowed = base.with_context(resource_type="role")

    assert narrowed.dimensions == {"connector": "vmware-vcenter", "resource_type": "role"}
    assert base.dimensions == {"connector": "vmware-vcenter"}


def test_dimensions_are_rendered(caplog):
    log = ContextualLogger(logging.getLogger("test.render")).with_context(operation="list")

    with caplog.at_level(logging.WARNING, logger="test.render"):
        log.warning("slow directory")

    assert "slow directory [operation=list]" in caplog.text
