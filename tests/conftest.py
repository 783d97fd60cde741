"""Shared pytest fixtures for emitter tests."""

from pathlib import Path

import pytest

from electro_emitter.core import ir
from electro_emitter.core.annotations import MetadataBuilder
from electro_emitter.core.model_loader import LoadedModel, load_model_document

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


@pytest.fixture
def scalars() -> dict[str, ir.ScalarType]:
    """Return the built-in scalar hierarchy."""
    return ir.builtin_scalars()


@pytest.fixture
def uuid_scalar(scalars: dict[str, ir.ScalarType]) -> ir.ScalarType:
    """Return ``scalar uuid extends string`` with @minLength(25) @maxLength(25)."""
    return ir.ScalarType(
        name="uuid",
        base=scalars["string"],
        facets=ir.Facets(min_length=25, max_length=25),
    )


@pytest.fixture
def priority_enum() -> ir.EnumType:
    """Return enum Priority {LOW, MEDIUM, HIGH} without member values."""
    return ir.EnumType(
        name="Priority",
        members=[ir.EnumMember(name=name) for name in ("LOW", "MEDIUM", "HIGH")],
    )


@pytest.fixture
def task_model(
    scalars: dict[str, ir.ScalarType],
    uuid_scalar: ir.ScalarType,
    priority_enum: ir.EnumType,
) -> ir.RecordType:
    """Return the Task model with scalar and enum defaults."""
    return ir.RecordType(
        name="Task",
        properties=[
            ir.ModelProperty(name="pk", type=uuid_scalar),
            ir.ModelProperty(
                name="priority",
                type=priority_enum,
                default=ir.DefaultValue(kind=ir.ValueKind.ENUM, member=priority_enum.members[1]),
            ),
            ir.ModelProperty(
                name="count",
                type=scalars["int32"],
                default=ir.DefaultValue(kind=ir.ValueKind.NUMERIC, value=0),
            ),
            ir.ModelProperty(
                name="active",
                type=scalars["boolean"],
                default=ir.DefaultValue(kind=ir.ValueKind.BOOLEAN, value=True),
            ),
            ir.ModelProperty(
                name="description",
                type=scalars["string"],
                optional=True,
                default=ir.DefaultValue(kind=ir.ValueKind.STRING, value="No description provided"),
            ),
        ],
    )


@pytest.fixture
def job_model(scalars: dict[str, ir.ScalarType], uuid_scalar: ir.ScalarType) -> ir.RecordType:
    """Return the Job model."""
    return ir.RecordType(
        name="Job",
        properties=[
            ir.ModelProperty(name="pk", type=uuid_scalar),
            ir.ModelProperty(name="jobId", type=uuid_scalar),
            ir.ModelProperty(name="personId", type=uuid_scalar),
            ir.ModelProperty(name="description", type=scalars["string"]),
        ],
    )


@pytest.fixture
def task_graph(task_model: ir.RecordType, priority_enum: ir.EnumType) -> ir.ModelGraph:
    return ir.ModelGraph(types={"Priority": priority_enum, "Task": task_model})


@pytest.fixture
def task_metadata(task_model: ir.RecordType) -> ir.MetadataTable:
    builder = MetadataBuilder()
    builder.entity(task_model, "task", "org")
    return builder.build()


@pytest.fixture
def job_graph(job_model: ir.RecordType) -> ir.ModelGraph:
    return ir.ModelGraph(types={"Job": job_model})


@pytest.fixture
def job_metadata(job_model: ir.RecordType) -> ir.MetadataTable:
    """Return Job metadata with the gsi1 ``jobs`` access pattern."""
    builder = MetadataBuilder()
    builder.entity(job_model, "job", "org")
    builder.index(
        job_model,
        "jobs",
        {
            "index": "gsi1",
            "collection": "jobs",
            "pk": {"field": "gsi1pk", "composite": ["personId"]},
            "sk": {"field": "gsi1sk", "composite": ["jobId"]},
        },
    )
    return builder.build()


@pytest.fixture
def org_example_dir() -> Path:
    """Return path to the bundled organisation example."""
    return EXAMPLES_DIR / "org"


@pytest.fixture
def org_model(org_example_dir: Path) -> LoadedModel:
    """Return the loaded organisation example model."""
    return load_model_document(org_example_dir / "models.yaml")
