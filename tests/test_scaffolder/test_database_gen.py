"""Unit tests for the lazy database generators (express_ddd_gen.scaffolder.database_gen).

Covers:
- Domain auto-generation when the entity's domain is missing
- MongoDB and MySQL output layout and container rebinding
- --fields / --config field data, --db-name, --env-var, --no-timestamps
- Malformed field input failing before anything is written
- --force never overwriting an existing domain during auto-generation
- Re-running against an existing database layer
"""

from __future__ import annotations

from pathlib import Path

import pytest

from express_ddd_gen.scaffolder.database_gen import LazyDatabaseGenerator
from express_ddd_gen.scaffolder.factory import GeneratorFactory
from express_ddd_gen.scaffolder.generator import GenerationContext
from express_ddd_gen.scaffolder.wiring import CONTAINER_FILE

pytestmark = pytest.mark.unit

MONGO_DIR = "src/infrastructure/database/product/mongodb"


def read(root: Path, relative: str) -> str:
    return (root / relative).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# MongoDB
# ---------------------------------------------------------------------------


class TestMongoDbLazyGenerator:
    @pytest.mark.asyncio
    async def test_generates_domain_then_database_layer(
        self, project: Path, factory: GeneratorFactory, make_context
    ):
        result = await factory.create("mongodb-lazy").generate(make_context(project, entity="product"))
        assert result.success, result.errors
        assert "src/domain/product/entities/product.entity.ts" in result.generated_files
        for relative in (
            "connection.ts",
            "schemas/product.schema.ts",
            "models/product.model.ts",
            "repositories/product.repository.ts",
            "index.ts",
        ):
            assert f"{MONGO_DIR}/{relative}" in result.generated_files
        assert len(result.generated_files) == 16 + 5

        container = read(project, CONTAINER_FILE)
        bind = "container.bind<IProductRepository>(TYPES.ProductRepository).to(ProductRepository);"
        rebind = "container.rebind<IProductRepository>(TYPES.ProductRepository).to(ProductMongoRepository);"
        assert bind in container
        assert container.index(bind) < container.index(rebind) < container.index("export { container };")
        assert CONTAINER_FILE in result.updated_files

    @pytest.mark.asyncio
    async def test_defaults(self, project: Path, factory: GeneratorFactory, make_context):
        await factory.create("mongodb-lazy").generate(make_context(project, entity="product"))
        connection = read(project, f"{MONGO_DIR}/connection.ts")
        assert "process.env.PRODUCT_MONGODB_URI" in connection
        assert "dbName: 'product_db'" in connection
        schema = read(project, f"{MONGO_DIR}/schemas/product.schema.ts")
        assert "isActive: { type: Boolean, default: true }," in schema
        assert "timestamps: true," in schema
        assert "collection: 'products'," in schema
        assert "export class ProductMongoRepository implements IProductRepository" in read(
            project, f"{MONGO_DIR}/repositories/product.repository.ts"
        )

    @pytest.mark.asyncio
    async def test_options(self, project: Path, factory: GeneratorFactory, make_context):
        ctx = make_context(
            project,
            entity="product",
            fields='[{"name": "price", "type": "number", "required": true, "min": 0}]',
            db_name="catalog",
            env_var="{ENTITY}_DB",
            timestamps=False,
        )
        result = await factory.create("mongodb-lazy").generate(ctx)
        assert result.success
        schema = read(project, f"{MONGO_DIR}/schemas/product.schema.ts")
        assert "price: { type: Number, required: true, min: 0 }," in schema
        assert "  price: number;" in schema
        assert "timestamps: false," in schema
        assert "createdAt" not in schema
        connection = read(project, f"{MONGO_DIR}/connection.ts")
        assert "process.env.PRODUCT_DB" in connection
        assert "dbName: 'catalog'" in connection

    @pytest.mark.asyncio
    async def test_existing_domain_is_reused(self, project: Path, factory: GeneratorFactory, make_context):
        await factory.create("domain").generate(make_context(project, domain="product"))
        result = await factory.create("mongodb-lazy").generate(make_context(project, entity="product"))
        assert result.success
        assert len(result.generated_files) == 5
        assert all(path.startswith(MONGO_DIR) for path in result.generated_files)

    @pytest.mark.asyncio
    async def test_malformed_fields_write_nothing(self, project: Path, factory: GeneratorFactory, make_context):
        container_before = read(project, CONTAINER_FILE)
        result = await factory.create("mongodb-lazy").generate(
            make_context(project, entity="product", fields="not-json")
        )
        assert not result.success
        assert result.errors[0].startswith("UserInputError: Invalid --fields JSON")
        assert result.generated_files == []
        assert not (project / "src" / "domain" / "product").exists()
        assert not (project / "src" / "infrastructure" / "database").exists()
        assert read(project, CONTAINER_FILE) == container_before

    @pytest.mark.asyncio
    async def test_fields_from_config_data(self, project: Path, factory: GeneratorFactory):
        ctx = GenerationContext(
            project_root=project,
            entity_name="product",
            template_data={"fields": [{"name": "sku", "type": "string", "unique": True}]},
        )
        result = await factory.create("mongodb-lazy").generate(ctx)
        assert result.success
        assert "sku: { type: String, unique: true }," in read(project, f"{MONGO_DIR}/schemas/product.schema.ts")

    @pytest.mark.asyncio
    async def test_invalid_config_fields(self, project: Path, factory: GeneratorFactory):
        ctx = GenerationContext(project_root=project, entity_name="product", template_data={"fields": [{"name": "x"}]})
        result = await factory.create("mongodb-lazy").generate(ctx)
        assert result.errors == ["UserInputError: Field 'x' is missing 'type' property"]

    @pytest.mark.asyncio
    async def test_missing_entity_name(self, project: Path, factory: GeneratorFactory, make_context):
        result = await factory.create("mongodb-lazy").generate(make_context(project))
        assert result.errors[0].startswith("MissingRequiredField:")

    @pytest.mark.asyncio
    async def test_force_leaves_existing_domain_files_alone(
        self, project: Path, factory: GeneratorFactory, make_context
    ):
        await factory.create("domain").generate(make_context(project, domain="order"))
        use_case = project / "src/application/use-cases/order/create-order.use-case.ts"
        use_case.write_text("// hand edited\n")
        (project / "src/domain/order/entities/order.entity.ts").unlink()

        result = await factory.create("mongodb-lazy").generate(make_context(project, entity="order", force=True))

        assert result.success, result.errors
        assert use_case.read_text() == "// hand edited\n"
        assert "src/application/use-cases/order/create-order.use-case.ts" in result.skipped_files
        assert "src/domain/order/entities/order.entity.ts" in result.generated_files
        assert "src/infrastructure/database/order/mongodb/connection.ts" in result.generated_files

    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, project: Path, factory: GeneratorFactory, make_context):
        generator = factory.create("mongodb-lazy")
        await generator.generate(make_context(project, entity="product"))
        container = read(project, CONTAINER_FILE)
        result = await generator.generate(make_context(project, entity="product"))
        assert result.success
        assert result.generated_files == []
        assert len(result.skipped_files) == 5
        assert read(project, CONTAINER_FILE) == container
        assert container.count("container.rebind<IProductRepository>") == 1


# ---------------------------------------------------------------------------
# MySQL
# ---------------------------------------------------------------------------


class TestMySqlLazyGenerator:
    @pytest.mark.asyncio
    async def test_compound_entity(self, project: Path, factory: GeneratorFactory, make_context):
        result = await factory.create("mysql-lazy").generate(make_context(project, entity="order-item"))
        assert result.success, result.errors
        base = "src/infrastructure/database/order-item/mysql"
        schema = read(project, f"{base}/schemas/order-item.schema.ts")
        assert "tableName: 'order_items'," in schema
        assert "export const OrderItemColumns: ModelAttributes = {" in schema
        assert "name: { type: DataTypes.STRING(255), allowNull: false, validate: { len: [0, 255] } }," in schema
        connection = read(project, f"{base}/connection.ts")
        assert "process.env.ORDER_ITEM_DATABASE_URL" in connection
        assert "/order_item_db'" in connection
        assert (
            "container.rebind<IOrderItemRepository>(TYPES.OrderItemRepository).to(OrderItemMySqlRepository);"
            in read(project, CONTAINER_FILE)
        )

    @pytest.mark.asyncio
    async def test_id_field_dropped(self, project: Path, factory: GeneratorFactory, make_context):
        ctx = make_context(
            project,
            entity="invoice",
            fields="[{'name': 'id', 'type': 'uuid'}, {'name': 'total', 'type': 'decimal', 'required': true}]",
        )
        result = await factory.create("mysql-lazy").generate(ctx)
        assert result.success
        schema = read(project, "src/infrastructure/database/invoice/mysql/schemas/invoice.schema.ts")
        assert "total: { type: DataTypes.DECIMAL, allowNull: false }," in schema
        assert schema.count("  id:") == 2

    @pytest.mark.asyncio
    async def test_non_numeric_length_is_a_user_input_error(
        self, project: Path, factory: GeneratorFactory, make_context
    ):
        result = await factory.create("mysql-lazy").generate(
            make_context(project, entity="book", fields='[{"name": "title", "type": "string", "length": "abc"}]')
        )
        assert not result.success
        assert result.errors[0].startswith("UserInputError: Invalid field 'title'")
        assert result.generated_files == []
        assert not (project / "src" / "domain" / "book").exists()


class TestLazyDatabaseGenerator:
    def test_is_abstract(self):
        with pytest.raises(TypeError, match="abstract"):
            LazyDatabaseGenerator(None, None, None)
