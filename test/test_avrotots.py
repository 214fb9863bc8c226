import json
import os
import shutil
import sys
import tempfile

from fastavro.schema import parse_schema

from avrotsify.avrotots import (convert_avro_schema_to_typescript, convert_avro_to_typescript,
                                get_files_from_input, load_schema_document)
from avrotsify.schema import MalformedInputError

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

import unittest

avsc_dir = os.path.join(project_root, "test", "avsc")


def read_text(file_path: str) -> str:
    with open(file_path, 'r', encoding='utf-8') as file:
        return file.read()


class TestAvroToTypeScript(unittest.TestCase):

    def setUp(self):
        self.out_dir = os.path.join(tempfile.gettempdir(), "avrotsify", self.id().split('.')[-1])
        if os.path.exists(self.out_dir):
            shutil.rmtree(self.out_dir, ignore_errors=True)
        os.makedirs(self.out_dir, exist_ok=True)

    def validate_avro_schema(self, avro_name: str):
        with open(os.path.join(avsc_dir, f"{avro_name}.avsc"), 'r', encoding='utf-8') as file:
            parse_schema(json.load(file))

    def run_test(self, avro_name: str):
        """ Convert one schema file and compare with its reference output """
        self.validate_avro_schema(avro_name)
        avro_path = os.path.join(avsc_dir, f"{avro_name}.avsc")
        result = convert_avro_to_typescript(avro_path, self.out_dir)
        self.assertTrue(result.succeeded)
        self.assertEqual(result.diagnostics, [])
        ts_path = os.path.join(self.out_dir, f"{avro_name}.ts")
        ref_path = os.path.join(avsc_dir, f"{avro_name}-ref.ts")
        self.assertEqual(read_text(ts_path), read_text(ref_path))

    def test_convert_pkt_avsc_to_typescript(self):
        self.run_test("pkt")

    def test_convert_order_avsc_to_typescript(self):
        self.run_test("order")

    def test_convert_customer_avsc_to_typescript(self):
        self.run_test("customer")

    def test_convert_tree_avsc_to_typescript(self):
        """ Self-referencing records refer to their own interface """
        self.run_test("tree")

    def test_concat_removes_duplicated_types(self):
        concat_path = os.path.join(self.out_dir, "shop.ts")
        result = convert_avro_to_typescript(
            [os.path.join(avsc_dir, "customer.avsc"), os.path.join(avsc_dir, "order.avsc")],
            concat=concat_path)
        self.assertTrue(result.succeeded)
        content = read_text(concat_path)
        self.assertEqual(content, read_text(os.path.join(avsc_dir, "shop-concat-ref.ts")))
        self.assertEqual(content.count("export interface IAddress"), 1)
        self.assertEqual(content.count("export enum Status"), 1)

    def test_per_input_mode_keeps_duplicates(self):
        result = convert_avro_to_typescript(
            [os.path.join(avsc_dir, "customer.avsc"), os.path.join(avsc_dir, "order.avsc")],
            self.out_dir)
        self.assertTrue(result.succeeded)
        for name in ("customer", "order"):
            content = read_text(os.path.join(self.out_dir, f"{name}.ts"))
            self.assertEqual(content.count("export interface IAddress"), 1)
            self.assertEqual(content.count("export enum Status"), 1)

    def test_convert_folder(self):
        input_dir = os.path.join(self.out_dir, "schemas")
        os.makedirs(input_dir)
        for name in ("pkt", "tree"):
            shutil.copy(os.path.join(avsc_dir, f"{name}.avsc"), input_dir)
        with open(os.path.join(input_dir, "notes.txt"), 'w', encoding='utf-8') as file:
            file.write("not a schema")

        result = convert_avro_to_typescript(input_dir)
        self.assertTrue(result.succeeded)
        self.assertEqual(sorted(unit.name for unit in result.units), ["pkt.ts", "tree.ts"])
        self.assertTrue(os.path.exists(os.path.join(input_dir, "pkt.ts")))
        self.assertTrue(os.path.exists(os.path.join(input_dir, "tree.ts")))
        self.assertFalse(os.path.exists(os.path.join(input_dir, "notes.ts")))

    def test_out_folder_is_created(self):
        out_folder = os.path.join(self.out_dir, "nested", "output")
        convert_avro_to_typescript(os.path.join(avsc_dir, "pkt.avsc"), out_folder)
        self.assertTrue(os.path.exists(os.path.join(out_folder, "pkt.ts")))

    def test_bad_files_do_not_stop_other_files(self):
        input_dir = os.path.join(self.out_dir, "mixed")
        os.makedirs(input_dir)
        shutil.copy(os.path.join(avsc_dir, "pkt.avsc"), input_dir)
        with open(os.path.join(input_dir, "broken.avsc"), 'w', encoding='utf-8') as file:
            file.write("{ this is not json")
        with open(os.path.join(input_dir, "scalar.avsc"), 'w', encoding='utf-8') as file:
            file.write('"string"')

        result = convert_avro_to_typescript([input_dir, os.path.join(self.out_dir, "missing.avsc")])
        self.assertFalse(result.succeeded)
        failed = sorted(os.path.basename(failure.document) for failure in result.failures)
        self.assertEqual(failed, ["broken.avsc", "missing.avsc", "scalar"])
        self.assertEqual([unit.name for unit in result.units], ["pkt.ts"])
        self.assertEqual(read_text(os.path.join(input_dir, "pkt.ts")),
                         read_text(os.path.join(avsc_dir, "pkt-ref.ts")))

    def test_verbose_prints_output(self):
        from io import StringIO
        from unittest.mock import patch
        with patch('sys.stdout', new_callable=StringIO) as stdout:
            convert_avro_to_typescript(os.path.join(avsc_dir, "pkt.avsc"), self.out_dir, verbose=True)
        self.assertIn("export interface IPkt", stdout.getvalue())
        self.assertIn("is written to", stdout.getvalue())


def test_get_files_from_input_file():
    pkt_path = os.path.join(avsc_dir, "pkt.avsc")
    assert get_files_from_input(pkt_path) == [pkt_path]


def test_get_files_from_input_folder_lists_avsc_only():
    files = [os.path.basename(f) for f in get_files_from_input(avsc_dir)]
    assert files == ["customer.avsc", "order.avsc", "pkt.avsc", "tree.avsc"]


def test_get_files_from_input_missing():
    import pytest
    with pytest.raises(FileNotFoundError):
        get_files_from_input(os.path.join(avsc_dir, "does-not-exist.avsc"))


def test_load_schema_document_names_document_after_file():
    document = load_schema_document(os.path.join(avsc_dir, "pkt.avsc"))
    assert document.name == "pkt"
    assert document.schema["name"] == "Pkt"


def test_load_schema_document_rejects_invalid_json(tmp_path):
    import pytest
    bad = tmp_path / "bad.avsc"
    bad.write_text("[1, 2", encoding="utf-8")
    with pytest.raises(MalformedInputError) as excinfo:
        load_schema_document(str(bad))
    assert str(bad) in str(excinfo.value)


def test_convert_avro_schema_to_typescript_in_memory():
    schema = {"type": "record", "name": "Pkt",
              "fields": [{"name": "id", "type": "long"}, {"name": "tag", "type": ["null", "string"]}]}
    assert convert_avro_schema_to_typescript(schema) == \
        "export interface IPkt {\n  id: number;\n  tag?: string;\n}\n"


def test_convert_avro_schema_to_typescript_raises_for_malformed_schema():
    import pytest
    with pytest.raises(MalformedInputError):
        convert_avro_schema_to_typescript({"type": "record", "fields": []})


def test_concat_folder_links_reference_to_later_file(tmp_path):
    order = {"type": "record", "name": "Order", "namespace": "shop",
             "fields": [{"name": "customer", "type": "shop.Customer"}]}
    customer = {"type": "record", "name": "Customer", "namespace": "shop",
                "fields": [{"name": "name", "type": "string"}]}
    (tmp_path / "a-order.avsc").write_text(json.dumps(order), encoding="utf-8")
    (tmp_path / "b-customer.avsc").write_text(json.dumps(customer), encoding="utf-8")
    concat_path = tmp_path / "shop.ts"
    result = convert_avro_to_typescript(str(tmp_path), concat=str(concat_path))
    assert result.succeeded
    content = concat_path.read_text(encoding="utf-8")
    assert "  customer: ICustomer;" in content
    assert "export interface ICustomer {" in content
