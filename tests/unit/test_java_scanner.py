"""Unit tests for ctm.mapping.java."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from ctm.config import SourceCode
from ctm.errors import SourceScanError
from ctm.mapping.java import java_class_name, java_method_name, scan_java, scan_java_lines
from ctm.mapping.models import BacklogReference, TrackerSource


def _scan(code: str) -> list[tuple[str, str, list[str]]]:
    lines = textwrap.dedent(code).splitlines(keepends=True)
    return [
        (entry.test.class_name, entry.test.method_name, [r.id for r in entry.backlog_references])
        for entry in scan_java_lines(lines, "testFile.java")
    ]


class TestJavaHelpers:
    """Tests for the line helpers."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("public class MyTest {", "MyTest"),
            ("public class Box<T>{", "Box"),
            ("class Inner{", "Inner"),
            ("public class AppTest extends TestCase {", "AppTest"),
        ],
    )
    def test_java_class_name(self, line: str, expected: str) -> None:
        assert java_class_name(line, line.rfind("class ")) == expected

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("public void someTest() {", "someTest"),
            ("public boolean anotherTestMethod(String a) {", "anotherTestMethod"),
            ("public void noBrace()", ""),
            ("{", ""),
        ],
    )
    def test_java_method_name(self, line: str, expected: str) -> None:
        assert java_method_name(line) == expected


class TestScanJavaLines:
    """Tests for marker scoping in Java sources."""

    def test_class_marker(self) -> None:
        """Test a marker above the class applies to its tests."""
        entries = _scan(
            """
            package com.sap.ctm.testing;

            import org.junit.*;

            // Trace(Jira:MYJIRAPROJECT-3)
            public class MyTest {

                @Test
                public void someTest() {
                    // Do something meaningful
                }

            }
            """
        )

        assert entries == [("com.sap.ctm.testing.MyTest", "someTest", ["MYJIRAPROJECT-3"])]

    def test_dangling_comma_in_marker(self) -> None:
        entries = _scan(
            """
            package com.sap.ctm.testing;

            // Trace(Jira:MYJIRAPROJECT-3, )    This one should not fail the parser
            public class MyTest {

                @Test
                public void someTest() {
                }
            }
            """
        )

        assert entries == [("com.sap.ctm.testing.MyTest", "someTest", ["MYJIRAPROJECT-3"])]

    def test_method_marker_with_other_annotations(self) -> None:
        entries = _scan(
            """
            package com.sap.ctm.testing;

            public class MyTest {

                // Trace(Jira:MYJIRAPROJECT-2)
                @Ignore @Test
                public void someTest() {
                }
            }
            """
        )

        assert entries == [("com.sap.ctm.testing.MyTest", "someTest", ["MYJIRAPROJECT-2"])]

    def test_untraced_test_between_traced_tests(self) -> None:
        """Test method markers apply to the next test only."""
        entries = _scan(
            """
            package com.sap.ctm.testing;

            // This is not a Trace parameter
            public class SomeTestClass {

                // Trace(Jira:MYJIRAPROJECT-12, GitHub:myOrg/myRepo#52, GitHub:myOrg/myRepo#62)
                @Test
                public void myTestMethod(String someParameter) {

                }

                @Test
                public void notTracedTest() {

                }

                // Trace(Jira:MYJIRAPROJECT-100)
                @Test
                public boolean anotherTestMethod() {

                }

            }
            """
        )

        assert entries == [
            (
                "com.sap.ctm.testing.SomeTestClass",
                "myTestMethod",
                ["MYJIRAPROJECT-12", "myOrg/myRepo#52", "myOrg/myRepo#62"],
            ),
            ("com.sap.ctm.testing.SomeTestClass", "anotherTestMethod", ["MYJIRAPROJECT-100"]),
        ]

    def test_no_package_and_brace_on_next_line(self) -> None:
        entries = _scan(
            """
            import org.junit.Test;

            public class SomeTestClass
            {
                // Trace(Jira:CLOUDECOSYSTEM-6381)
                @Test
                public void myTestMethod() {
                }
            }
            """
        )

        assert entries == [("SomeTestClass", "myTestMethod", ["CLOUDECOSYSTEM-6381"])]

    def test_junit3_test_prefix(self) -> None:
        """Test JUnit 3 style methods are recognised by their name."""
        entries = _scan(
            """
            package com.mycorp;

            public class AppTest extends TestCase {

                public AppTest(String testName) {
                    super(testName);
                }

                public static Test suite() {
                    return new TestSuite(AppTest.class);
                }

                // Trace(GitHub:doergn/sourcecodeRepo#1)
                public void testApp() {
                    assertTrue(true);
                }
            }
            """
        )

        assert entries == [("com.mycorp.AppTest", "testApp", ["doergn/sourcecodeRepo#1"])]

    def test_class_and_method_markers_give_separate_entries(self) -> None:
        entries = _scan(
            """
            package p;

            // Trace(Jira:CLS-1)
            public class T {
                // Trace(Jira:MTH-1)
                @Test
                public void a() {
                }

                @Test
                public void b() {
                }
            }
            """
        )

        assert entries == [
            ("p.T", "a", ["CLS-1"]),
            ("p.T", "a", ["MTH-1"]),
            ("p.T", "b", ["CLS-1"]),
        ]

    def test_inner_class(self) -> None:
        """Test inner classes use the Outer$Inner binary name."""
        entries = _scan(
            """
            package p;

            // Trace(Jira:IN-1)
            public class Outer {
                public class Inner {
                    @Test
                    public void t() {
                    }
                }
            }
            """
        )

        assert entries == [("p.Outer$Inner", "t", ["IN-1"])]

    def test_closing_brace_ends_class(self) -> None:
        """Test a brace in column zero ends the class scope."""
        lines = [
            "package p;\n",
            "public class A {\n",
            "}\n",
            "// Trace(Jira:X-1)\n",
            "public class B {\n",
            "    @Test public void t() {\n",
            "    }\n",
            "}\n",
        ]

        entries = scan_java_lines(lines)

        assert [(e.test.class_name, e.test.method_name) for e in entries] == [("p.B", "t")]

    def test_file_url_is_recorded(self) -> None:
        entries = scan_java_lines(
            ["// Trace(Jira:X-1)\n", "class A {\n", "  @Test void t() {\n"],
            "https://github.com/o/r/blob/main/A.java",
        )

        assert entries[0].test.file_url == "https://github.com/o/r/blob/main/A.java"
        assert entries[0].backlog_references == (
            BacklogReference(source=TrackerSource.JIRA, id="X-1"),
        )


class TestScanJava:
    """Tests for scanning a Java source tree."""

    def test_scans_tree_and_links_files(self, write_file: Callable[[str, str], Path], tmp_path: Path) -> None:
        write_file(
            "src/test/java/AppTest.java",
            """\
            // Trace(Jira:P-1)
            public class AppTest {
                @Test
                public void works() {
                }
            }
            """,
        )
        write_file("src/test/java/README.md", "// Trace(Jira:P-2)\n")
        source = SourceCode(
            local=str(tmp_path / "src"),
            language="java",
            git={"organization": "acme", "repository": "app", "branch": "main"},
        )

        entries = scan_java(source, "https://github.com")

        assert len(entries) == 1
        assert entries[0].test.file_url == (
            "https://github.com/acme/app/blob/main/test/java/AppTest.java"
        )

    def test_unreadable_file_fails(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "A.java").write_text("class A {}\n")

        def _fail(*args: object, **kwargs: object) -> None:
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "open", _fail)

        with pytest.raises(SourceScanError, match="Cannot read source file"):
            scan_java(SourceCode(local=str(tmp_path), language="java"))
