# Where: sam_runner/tests/test_template.py
# What: Tests for template loading and CodeUri-based function lookup.
# Why: The fixture-to-function mapping decides which Lambda each event hits.
from __future__ import annotations

import pytest

from sam_runner.template import (
    find_function_name,
    iter_function_names,
    load_template,
    parse_template,
)


class TestFunctionNameLookup:
    """Tests for find_function_name."""

    def test_returns_logical_id_of_matching_resource(self):
        template = parse_template(
            """
AWSTemplateFormatVersion: '2010-09-09'
Transform: AWS::Serverless-2016-10-31

Resources:
  UsersQueryFunction:
    Type: AWS::Serverless::Function
    Properties:
      CodeUri: dist/users-query
      Handler: index.handler
  UsersCreateFunction:
    Type: AWS::Serverless::Function
    Properties:
      CodeUri: dist/users-create
      Handler: index.handler
"""
        )

        assert find_function_name(template, "query") == "UsersQueryFunction"
        assert find_function_name(template, "users-create") == "UsersCreateFunction"

    def test_returns_none_without_match(self):
        template = {
            "Resources": {
                "HelloFunction": {"Properties": {"CodeUri": "functions/hello/"}},
            }
        }

        assert find_function_name(template, "goodbye") is None

    @pytest.mark.parametrize("root", [None, 42, "CodeUri", ["CodeUri"], 1.5, True])
    def test_non_mapping_root_returns_none(self, root):
        assert find_function_name(root, "query") is None

    def test_first_match_in_document_order_wins(self):
        template = {
            "Resources": {
                "AdminQueryFunction": {"Properties": {"CodeUri": "dist/admin/query"}},
                "UsersQueryFunction": {"Properties": {"CodeUri": "dist/users/query"}},
            }
        }

        assert find_function_name(template, "query") == "AdminQueryFunction"
        assert list(iter_function_names(template, "query")) == [
            "AdminQueryFunction",
            "UsersQueryFunction",
        ]

    def test_non_string_code_uri_is_ignored(self):
        template = {
            "Resources": {
                "BucketCode": {"Properties": {"CodeUri": {"Bucket": "b", "Key": "query"}}},
                "QueryFunction": {"Properties": {"CodeUri": "src/query"}},
            }
        }

        assert find_function_name(template, "query") == "QueryFunction"

    def test_code_uri_without_two_ancestors_is_skipped(self):
        template = {
            "CodeUri": "top/query",
            "Wrapper": {"CodeUri": "one-level/query"},
            "Resources": {"QueryFunction": {"Properties": {"CodeUri": "src/query"}}},
        }

        assert find_function_name(template, "query") == "QueryFunction"

    def test_lists_are_not_descended(self):
        template = {
            "Resources": [
                {"QueryFunction": {"Properties": {"CodeUri": "src/query"}}},
            ]
        }

        assert find_function_name(template, "query") is None

    def test_deeper_nesting_resolves_to_grandparent_key(self):
        template = {
            "Resources": {
                "QueryFunction": {"Properties": {"Package": {"CodeUri": "src/query"}}},
            }
        }

        # Only Resources.<Id>.Properties.CodeUri is attributed to <Id>.
        assert find_function_name(template, "query") == "Properties"


class TestTemplateLoading:
    """Tests for YAML loading with CloudFormation tags."""

    def test_intrinsic_tags_are_accepted(self):
        template = parse_template(
            """
Resources:
  QueryFunction:
    Type: AWS::Serverless::Function
    Properties:
      FunctionName: !Sub "${AWS::StackName}-query"
      CodeUri: dist/query
      Role: !GetAtt QueryRole.Arn
      Environment:
        Variables:
          TABLE: !Ref UsersTable
          NAMES: !Join [",", [a, b]]
"""
        )

        props = template["Resources"]["QueryFunction"]["Properties"]
        assert props["FunctionName"] == "${AWS::StackName}-query"
        assert props["Role"] == "QueryRole.Arn"
        assert props["Environment"]["Variables"]["TABLE"] == "UsersTable"
        assert find_function_name(template, "query") == "QueryFunction"

    def test_empty_document_is_empty_mapping(self):
        assert parse_template("") == {}

    def test_load_template_reads_file(self, tmp_path):
        path = tmp_path / "template.yaml"
        path.write_text(
            "Resources:\n  QueryFunction:\n    Properties:\n      CodeUri: dist/query\n",
            encoding="utf-8",
        )

        assert find_function_name(load_template(path), "query") == "QueryFunction"
