"""
DDO (DID document) model.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

DDO_CONTEXT = "https://w3id.org/did/v1"


class DDO(BaseModel):
    """DID document describing an agent and the services it offers"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    context: str = Field(DDO_CONTEXT, alias="@context")
    id: Optional[str] = None
    service: List[Dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def create_from_string(cls, text: str) -> "DDO":
        """
        Parse a DDO from JSON text

        Raises:
            ValueError: If the text is not a JSON object
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"DDO must be a JSON object, got {type(data).__name__}")
        return cls.create_from_dict(data)

    @classmethod
    def create_from_dict(cls, data: Dict[str, Any]) -> "DDO":
        return cls.model_validate(data)

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)

    def as_text(self) -> str:
        return json.dumps(self.as_dict())

    def get_service(self, service_type: str) -> Optional[Dict[str, Any]]:
        for service in self.service:
            if service.get("type") == service_type:
                return service
        return None

    def get_service_endpoint(self, service_type: str) -> Optional[str]:
        service = self.get_service(service_type)
        if service is None:
            return None
        return service.get("serviceEndpoint")
