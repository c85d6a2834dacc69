from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Largest page size the service accepts (signed 32-bit maximum)
MAX_PAGE_SIZE = 2147483647


class TenantModel(BaseModel):
    """Model for a tenant as returned by the service"""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Tenant name")


class DatabaseModel(BaseModel):
    """Model for a database as returned by the service"""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, description="Server-assigned database identifier")
    name: str = Field(..., description="Database name")
    tenant: Optional[str] = Field(None, description="Owning tenant name")


class KnownEmbeddingFunctionConfiguration(BaseModel):
    """A named embedding function with its provider-specific parameters"""
    type: Literal["known"] = "known"
    name: str = Field(..., description="Embedding function identifier, e.g. 'ollama'")
    config: Dict[str, Any] = Field(default_factory=dict, description="Provider parameters")


class LegacyEmbeddingFunctionConfiguration(BaseModel):
    """Embedding function registered before configurations were persisted"""
    type: Literal["legacy"] = "legacy"


class UnknownEmbeddingFunctionConfiguration(BaseModel):
    """Embedding function the server cannot describe"""
    type: Literal["unknown"] = "unknown"


EmbeddingFunctionConfiguration = Annotated[
    Union[
        KnownEmbeddingFunctionConfiguration,
        LegacyEmbeddingFunctionConfiguration,
        UnknownEmbeddingFunctionConfiguration,
    ],
    Field(discriminator="type"),
]


class CollectionConfiguration(BaseModel):
    """Collection configuration, sent on create and returned as ``configuration_json``"""
    model_config = ConfigDict(extra="ignore")

    embedding_function: Optional[EmbeddingFunctionConfiguration] = Field(
        None, description="Embedding function; the service default applies when absent")
    hnsw: Optional[Dict[str, Any]] = Field(None, description="HNSW index tuning")
    spann: Optional[Dict[str, Any]] = Field(None, description="SPANN index tuning")


class CollectionModel(BaseModel):
    """Model for a collection as returned by the service"""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Server-assigned collection identifier")
    name: str = Field(..., description="Collection name")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Collection metadata")
    configuration_json: Optional[CollectionConfiguration] = Field(None, description="Stored collection configuration")
    tenant: Optional[str] = Field(None, description="Owning tenant name")
    database: Optional[str] = Field(None, description="Owning database name")
    dimension: Optional[int] = Field(None, description="Embedding dimension, once known")
    version: Optional[int] = Field(None, description="Collection version")
    log_position: Optional[int] = Field(None, description="Write-ahead log position")


class CreateCollectionPayload(BaseModel):
    """Request model for creating a collection"""
    name: str = Field(..., description="Collection name")
    metadata: Optional[Dict[str, Any]] = Field(None, description="Collection metadata")
    configuration: Optional[CollectionConfiguration] = Field(None, description="Collection configuration")
    get_or_create: Optional[bool] = Field(None, description="Return the existing collection instead of failing")

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class Include(str, Enum):
    DOCUMENTS = "documents"
    METADATAS = "metadatas"


class GetRequestPayload(BaseModel):
    """Request model for reading records from a collection"""
    where: Optional[Dict[str, Any]] = Field(None, description="Metadata filter")
    where_document: Optional[Dict[str, Any]] = Field(None, description="Document filter")
    ids: Optional[List[str]] = Field(None, description="Restrict to these record ids")
    include: Optional[List[Include]] = Field(None, description="Fields to return")
    limit: Optional[int] = Field(None, description="Maximum number of records")
    offset: Optional[int] = Field(None, description="Number of records to skip")

    def to_request_body(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class GetResponse(BaseModel):
    """
    Response model for a collection read.

    ``ids``, ``documents`` and ``metadatas`` are parallel: index ``i`` in each
    refers to the same record.
    """
    model_config = ConfigDict(extra="ignore")

    ids: List[str] = Field(..., description="Record ids")
    documents: Optional[List[Optional[str]]] = Field(None, description="Record documents")
    metadatas: Optional[List[Optional[Dict[str, Any]]]] = Field(None, description="Record metadata")

    @model_validator(mode="after")
    def _check_parallel_lengths(self) -> "GetResponse":
        for field_name in ("documents", "metadatas"):
            values = getattr(self, field_name)
            if values is not None and len(values) != len(self.ids):
                raise ValueError(
                    f"{field_name} has {len(values)} entries but ids has {len(self.ids)}")
        return self
