"""Unit tests for ctm.mapping.mapping_file."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctm.errors import MappingFileError
from ctm.mapping.mapping_file import (
    parse_mapping_content,
    read_mapping_file,
    split_source_reference,
)
from ctm.mapping.models import BacklogReference, TrackerSource

MAPPING = """
[
  {
    "source_reference": "com.myCompany.myApp.myJavaTest",
    "jira_keys": ["MYJIRAPROJECT-1"]
  },
  {
    "source_reference": "com.myCompany.myApp.myJavaTest.myMethod()",
    "github_keys": ["myOrg/mySourcecodeRepo#1"]
  },
  {
    "source_reference": "com.myCompany.myApp.myJavaTest.myOtherMethod()",
    "filelocation": {
      "git": {"organization": "myOrg", "repository": "mySourcecodeRepo", "branch": "master"},
      "relativePath": "./src/test/java/com/myCompany/myApp/myJavaTest.java"
    },
    "jira_keys": ["MYJIRAPROJECT-4", "MYJIRAPROJECT-5"],
    "github_keys": ["myOrg/mySourcecodeRepo#2"]
  }
]
"""


class TestSplitSourceReference:
    """Tests for class/method splitting."""

    def test_method_reference(self) -> None:
        assert split_source_reference("com.acme.AppTest.testLogin()") == (
            "com.acme.AppTest",
            "testLogin",
        )

    def test_class_reference(self) -> None:
        assert split_source_reference("com.acme.AppTest") == ("com.acme.AppTest", "")


class TestParseMappingContent:
    """Tests for parse_mapping_content."""

    def test_entries(self) -> None:
        """Test classes, methods, links and key order."""
        entries = parse_mapping_content(MAPPING, "https://github.com")

        assert [(e.test.class_name, e.test.method_name) for e in entries] == [
            ("com.myCompany.myApp.myJavaTest", ""),
            ("com.myCompany.myApp.myJavaTest", "myMethod"),
            ("com.myCompany.myApp.myJavaTest", "myOtherMethod"),
        ]
        assert entries[0].test.file_url == ""
        assert entries[2].test.file_url == (
            "https://github.com/myOrg/mySourcecodeRepo/blob/master/"
            "src/test/java/com/myCompany/myApp/myJavaTest.java"
        )
        assert entries[2].backlog_references == (
            BacklogReference(source=TrackerSource.JIRA, id="MYJIRAPROJECT-4"),
            BacklogReference(source=TrackerSource.JIRA, id="MYJIRAPROJECT-5"),
            BacklogReference(source=TrackerSource.GITHUB, id="myOrg/mySourcecodeRepo#2"),
        )

    def test_invalid_document(self) -> None:
        with pytest.raises(MappingFileError, match="not a valid JSON mapping document"):
            parse_mapping_content('{"source_reference": "A"}')

    def test_missing_source_reference(self) -> None:
        with pytest.raises(MappingFileError):
            parse_mapping_content('[{"jira_keys": ["A-1"]}]')


class TestReadMappingFile:
    """Tests for read_mapping_file."""

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "mapping.json"
        path.write_text(MAPPING)

        assert len(read_mapping_file(path)) == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MappingFileError, match="Cannot read mapping file"):
            read_mapping_file(tmp_path / "missing.json")
