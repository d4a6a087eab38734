"""
Tests for template context shaping, template loading and file output.
"""

from pathlib import Path

import pytest

from record_auto_generator.codegen import (
    TEMPLATE_NAME,
    RecordWriter,
    build_template_context,
    load_template,
    resolve_output_path,
)
from record_auto_generator.domain.models import FieldDescriptor, GenerationContext
from record_auto_generator.exceptions import ConfigurationError, RenderError


@pytest.fixture
def order_items_context() -> GenerationContext:
    return GenerationContext(
        package_name="com.example.records",
        class_name="OrderItems",
        table_name="order_items",
        pk_columns=(FieldDescriptor("orderId", "order_id", "Integer"),),
        columns=(
            FieldDescriptor("unitPrice", "unit_price", "BigDecimal"),
            FieldDescriptor("createdAt", "created_at", "Instant"),
        ),
        imports=("java.math.BigDecimal", "java.time.Instant"),
    )


@pytest.fixture
def composite_context() -> GenerationContext:
    return GenerationContext(
        package_name="com.example.records",
        class_name="OrderLine",
        table_name="tbl_order_line",
        pk_columns=(
            FieldDescriptor("orderId", "order_id", "Long"),
            FieldDescriptor("lineNumber", "line_no", "Integer", True),
        ),
        columns=(FieldDescriptor("note", "note", "String"),),
    )


def test_template_context_keys(order_items_context):
    data = build_template_context(order_items_context)

    assert set(data) == {
        "packageName", "className", "dbTableName", "hasCustomTableMapping",
        "pkColumns", "columns", "hasCompositePk", "imports",
    }
    assert data["packageName"] == "com.example.records"
    assert data["className"] == "OrderItems"
    assert data["dbTableName"] == "order_items"
    assert data["hasCustomTableMapping"] is True
    assert data["hasCompositePk"] is False
    assert data["imports"] == ["java.math.BigDecimal", "java.time.Instant"]
    assert data["pkColumns"] == [
        {"javaName": "orderId", "dbName": "order_id", "type": "Integer", "hasCustomMapping": False}
    ]
    assert [c["javaName"] for c in data["columns"]] == ["unitPrice", "createdAt"]


def test_custom_table_mapping_ignores_case():
    same = GenerationContext("p", "Orders", "ORDERS")
    renamed = GenerationContext("p", "User", "tbl_usr")
    assert not same.has_custom_table_mapping
    assert renamed.has_custom_table_mapping


def test_resolve_output_path(tmp_path):
    path = resolve_output_path(tmp_path, "com.example.records", "OrderItems", "java")
    assert path == tmp_path / "com" / "example" / "records" / "OrderItems.java"
    assert resolve_output_path(tmp_path, "pkg", "A", ".kt") == tmp_path / "pkg" / "A.kt"


def test_builtin_template_single_key(order_items_context):
    content = RecordWriter(load_template(), Path("unused")).render(order_items_context)

    assert content.startswith("package com.example.records;\n")
    assert "import java.math.BigDecimal;\n" in content
    assert "import java.time.Instant;\n" in content
    assert "import org.springframework.data.annotation.Id;\n" in content
    assert "public record OrderItems(\n" in content
    assert "    @Id Integer orderId,\n" in content
    assert "    BigDecimal unitPrice,\n" in content
    assert "    Instant createdAt\n) {}\n" in content
    assert '@Table("order_items")\npublic record OrderItems(\n' in content
    assert "@Column" not in content


def test_builtin_template_composite_key(composite_context):
    content = RecordWriter(load_template(), Path("unused")).render(composite_context)

    assert '@Table("tbl_order_line")\n' in content
    assert "import org.springframework.data.relational.core.mapping.Embedded;\n" in content
    assert "import org.springframework.data.relational.core.mapping.Column;\n" in content
    assert "    @Id @Embedded.Empty PrimaryKey id,\n" in content
    assert "    public record PrimaryKey(\n" in content
    assert '        @Column("line_no") Integer lineNumber\n' in content
    assert "        Long orderId,\n" in content
    assert "    String note\n" in content


def test_write_creates_package_directories(tmp_path, order_items_context):
    writer = RecordWriter(load_template(), tmp_path / "out")
    path = writer.write(order_items_context)

    assert path == tmp_path / "out" / "com" / "example" / "records" / "OrderItems.java"
    assert path.read_text(encoding="utf-8") == writer.render(order_items_context)


def test_custom_templates_directory(tmp_path, order_items_context):
    (tmp_path / TEMPLATE_NAME).write_text(
        "{{ packageName }}.{{ className }}:{% for c in pkColumns + columns %}{{ c.javaName }};{% endfor %}",
        encoding="utf-8",
    )
    writer = RecordWriter(load_template(str(tmp_path)), tmp_path / "out", "txt")
    path = writer.write(order_items_context)

    assert path.name == "OrderItems.txt"
    assert path.read_text(encoding="utf-8") == "com.example.records.OrderItems:orderId;unitPrice;createdAt;"


def test_missing_templates_directory(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        load_template(str(tmp_path / "nope"))
    assert "Templates path not exists" in exc_info.value.message


def test_templates_directory_without_template(tmp_path):
    with pytest.raises(RenderError) as exc_info:
        load_template(str(tmp_path))
    assert exc_info.value.error_code == "RENDER_ERROR"


def test_template_syntax_error(tmp_path):
    (tmp_path / TEMPLATE_NAME).write_text("{% for x in %}{% endfor %}", encoding="utf-8")
    with pytest.raises(RenderError):
        load_template(str(tmp_path))


def test_undefined_variable_fails_render(tmp_path, order_items_context):
    (tmp_path / TEMPLATE_NAME).write_text("{{ notAKey }}", encoding="utf-8")
    writer = RecordWriter(load_template(str(tmp_path)), tmp_path / "out")

    with pytest.raises(RenderError) as exc_info:
        writer.write(order_items_context)
    assert exc_info.value.context["table"] == "order_items"
    assert not (tmp_path / "out").exists()
