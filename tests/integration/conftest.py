"""Fixtures for end-to-end runs against a project on disk."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
import yaml

APP_TEST_JAVA = """\
package com.acme;

import org.junit.Test;

// Trace(Jira:ACME-1)
public class AppTest {

    // Trace(GitHub:acme/app#4)
    @Test
    public void testLogin() {
    }

    @Test
    public void testLogout() {
    }
}
"""

CART_TEST_PY = """\
import unittest


# Trace(Jira:ACME-2)
class TestCart(unittest.TestCase):

    def test_add(self):
        pass
"""

CHECKOUT_SPEC = """\
# Checkout

## Pay with card
Requirements: Jira:ACME-3

* pay
"""

SUREFIRE_REPORT = """\
<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="com.acme.AppTest" tests="2" failures="1">
  <testcase classname="com.acme.AppTest" name="testLogin"/>
  <testcase classname="com.acme.AppTest" name="testLogout"><failure/></testcase>
</testsuite>
"""

PYTEST_REPORT = """\
<testsuites>
  <testsuite name="pytest">
    <testcase classname="test_cart.TestCart" name="test_add"/>
  </testsuite>
</testsuites>
"""

GAUGE_REPORT = """\
<testsuites>
  <testsuite name="Checkout">
    <testcase classname="Checkout" name="Pay with card 1"/>
    <testcase classname="Checkout" name="Pay with card 2"/>
  </testsuite>
</testsuites>
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with Java, Python and Gauge tests, reports and a ctm.yaml."""
    files = {
        "java/com/acme/AppTest.java": APP_TEST_JAVA,
        "python/test_cart.py": CART_TEST_PY,
        "specs/checkout.spec": CHECKOUT_SPEC,
        "reports/TEST-com.acme.AppTest.xml": SUREFIRE_REPORT,
        "reports/pytest.xml": PYTEST_REPORT,
        "reports/gauge/result.xml": GAUGE_REPORT,
    }
    for relative, content in files.items():
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")

    git = {"organization": "acme", "repository": "app", "branch": "main"}
    config = {
        "github": {"baseURL": "https://github.com"},
        "jira": {"baseURL": "https://jira.acme.corp"},
        "sourcecode": [
            {"local": str(tmp_path / "java"), "language": "java", "git": git},
            {"local": str(tmp_path / "python"), "language": "python", "git": git},
            {"local": str(tmp_path / "specs"), "language": "gaugespec", "git": git},
        ],
        "testReport": [
            {"type": "xunit-xml", "local": str(tmp_path / "reports")},
        ],
        "traceabilityRepo": {
            "git": {"organization": "acme", "repository": "traceability", "branch": "main"}
        },
        "workDir": str(tmp_path / "work"),
        "outputDir": str(tmp_path / "out"),
    }
    (tmp_path / "ctm.yaml").write_text(yaml.safe_dump(config), encoding="utf-8")
    return tmp_path
