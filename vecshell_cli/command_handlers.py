import logging

from vecshell_cli.command_parser import ParsedCommand
from vecshell_cli.embedding_function_selector import select_embedding_function
from vecshell_cli.result_formatter import format_tenant, format_database, format_collection, format_records
from vecshell_data_model.data_models import MAX_PAGE_SIZE, CollectionConfiguration, CreateCollectionPayload, \
    GetRequestPayload, Include

logger = logging.getLogger(__name__)

HELP_TEXT = """Available commands:

Tenant Management:
  tenant new <tenant_name>        - Creates a new tenant.
  tenant get <tenant_name>        - Retrieves an existing tenant.

Database Management:
  database new <tenant> <db_name>   - Creates a new database within a tenant.
  database del <tenant> <db_name>   - Deletes a database from a tenant.
  database get <tenant> <db_name>   - Retrieves an existing database.
  database ls <tenant>              - Lists all databases within a tenant.

Collection Management:
  collection new <t> <d> <c> [ef]  - Creates a new collection.
    t: tenant_name
    d: database_name
    c: collection_name
    ef: optional embedding function, e.g., 'ollama <model_name>'
  collection del <t> <d> <c>        - Deletes a collection.
  collection get <t> <d> <c>        - Retrieves a collection and shows its item count.
  collection ls <t> <d>             - Lists all collections in a database.
  collection read <t> <d> <c>       - Reads a collection.

General:
  help                            - Shows this help message.
  exit                            - Exits the application.
"""


# ==================== Resource resolution ====================

async def resolve_tenant(client, tenant_name: str):
    logger.debug(f"Resolving tenant {tenant_name}")
    return await client.get_tenant(tenant_name)


async def resolve_database(client, tenant_name: str, database_name: str):
    tenant = await resolve_tenant(client, tenant_name)
    logger.debug(f"Resolving database {tenant_name}/{database_name}")
    return await tenant.get_database(database_name)


async def resolve_collection(client, tenant_name: str, database_name: str, collection_name: str):
    database = await resolve_database(client, tenant_name, database_name)
    logger.debug(f"Resolving collection {tenant_name}/{database_name}/{collection_name}")
    return await database.get_collection(collection_name)


# ==================== Handlers ====================

# Map command names to handler functions
_COMMAND_HANDLERS = {
    "tenant-new":       "_handle_tenant_new",
    "tenant-get":       "_handle_tenant_get",
    "database-new":     "_handle_database_new",
    "database-del":     "_handle_database_del",
    "database-get":     "_handle_database_get",
    "database-ls":      "_handle_database_ls",
    "collection-new":   "_handle_collection_new",
    "collection-del":   "_handle_collection_del",
    "collection-get":   "_handle_collection_get",
    "collection-ls":    "_handle_collection_ls",
    "collection-read":  "_handle_collection_read",
    "help":             "_handle_help",
}


async def dispatch(client, command: ParsedCommand) -> bool:
    """Run the handler for a matched command; False when the command has none."""
    handler_name = _COMMAND_HANDLERS.get(command.name)
    if not handler_name:
        return False
    handler = globals().get(handler_name)
    await handler(client, command)
    return True


async def _handle_tenant_new(client, command):
    tenant = await client.create_tenant(command["tenant"])
    print(format_tenant(tenant))


async def _handle_tenant_get(client, command):
    tenant = await resolve_tenant(client, command["tenant"])
    print(format_tenant(tenant))


async def _handle_database_new(client, command):
    tenant = await resolve_tenant(client, command["tenant"])
    database = await tenant.create_database(command["database"])
    print(format_database(database))


async def _handle_database_del(client, command):
    tenant = await resolve_tenant(client, command["tenant"])
    await tenant.delete_database(command["database"])
    print(command["database"])


async def _handle_database_get(client, command):
    database = await resolve_database(client, command["tenant"], command["database"])
    print(format_database(database))


async def _handle_database_ls(client, command):
    tenant = await resolve_tenant(client, command["tenant"])
    for database in await tenant.list_databases(MAX_PAGE_SIZE, None):
        print(format_database(database))


async def _handle_collection_new(client, command):
    # Rejected embedding functions abort before any remote call
    ef = select_embedding_function(command.trailing)
    database = await resolve_database(client, command["tenant"], command["database"])
    payload = CreateCollectionPayload(
        name=command["collection"],
        configuration=CollectionConfiguration(embedding_function=ef),
    )
    collection = await database.create_collection(payload)
    print(format_collection(collection))


async def _handle_collection_del(client, command):
    database = await resolve_database(client, command["tenant"], command["database"])
    await database.delete_collection(command["collection"])
    print(command["collection"])


async def _handle_collection_get(client, command):
    collection = await resolve_collection(client, command["tenant"], command["database"], command["collection"])
    print(format_collection(collection, await collection.count()))


async def _handle_collection_ls(client, command):
    database = await resolve_database(client, command["tenant"], command["database"])
    collections = await database.list_collections(MAX_PAGE_SIZE, None)
    # One count call per collection, issued in listing order
    for collection in collections:
        print(format_collection(collection, await collection.count()))


async def _handle_collection_read(client, command):
    collection = await resolve_collection(client, command["tenant"], command["database"], command["collection"])
    payload = GetRequestPayload(
        include=[Include.DOCUMENTS, Include.METADATAS],
        limit=MAX_PAGE_SIZE,
    )
    response = await collection.get(payload)
    for line in format_records(response):
        print(line)


async def _handle_help(client=None, command=None):  #NOSONAR
    print(HELP_TEXT, end="")
