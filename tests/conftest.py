"""
Pytest configuration and shared fixtures
"""
import pytest
from pathlib import Path
import tempfile

from schema_flow.core.config import Config, LoggingConfig, StorageConfig
from schema_flow.handlers.schema_handler import SchemaHandler
from schema_flow.models.schema import Table, Column


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir):
    """Configuration writing to the temporary directory"""
    return Config(
        logging=LoggingConfig(level="DEBUG"),
        storage=StorageConfig(
            path=str(temp_dir / "schema.json"),
            export_path=str(temp_dir / "schema.sql")
        )
    )


@pytest.fixture
def users_table():
    """Users(id PK)"""
    return Table(
        id="t-users",
        name="Users",
        columns=[
            Column(id="c-users-id", name="id", type="INT", is_primary_key=True)
        ]
    )


@pytest.fixture
def posts_table():
    """Posts(id PK, user_id FK -> Users.id)"""
    return Table(
        id="t-posts",
        name="Posts",
        columns=[
            Column(id="c-posts-id", name="id", type="INT", is_primary_key=True),
            Column(
                id="c-posts-user",
                name="user_id",
                type="INT",
                is_foreign_key=True,
                references_table="t-users",
                references_column="c-users-id"
            )
        ]
    )


@pytest.fixture
def sample_tables(users_table, posts_table):
    """Users and Posts, in that order"""
    return [users_table, posts_table]


@pytest.fixture
def sample_handler(sample_tables):
    """Handler seeded with Users and Posts"""
    return SchemaHandler(sample_tables)


@pytest.fixture
def unlinked_tables():
    """Customers/Orders schema without any foreign keys"""
    return [
        Table(
            id="t-customers",
            name="Customers",
            columns=[
                Column(id="c-cust-id", name="id", type="INT", is_primary_key=True,
                       is_nullable=False),
                Column(id="c-cust-name", name="name", type="VARCHAR(100)",
                       is_nullable=False)
            ]
        ),
        Table(
            id="t-orders",
            name="Orders",
            columns=[
                Column(id="c-ord-id", name="order_no", type="INT", is_primary_key=True),
                Column(id="c-ord-cust", name="customer_id", type="INT"),
                Column(id="c-ord-total", name="total", type="DECIMAL(10,2)")
            ]
        )
    ]
