"""
Adapter: CNPJá open registry client.

GET {base_url}/{cnpj} → dados públicos do estabelecimento.
Falhas de rede/HTTP/JSON viram None (o cadastro manual segue).
"""

import logging

import httpx

from src.core.interfaces.company_registry import ICompanyRegistry, RegistryRecord

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://open.cnpja.com/office"


class CnpjaRegistryClient(ICompanyRegistry):
    """Consulta pública de CNPJ via httpx."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def lookup(self, cnpj_digits: str) -> RegistryRecord | None:
        url = f"{self._base_url}/{cnpj_digits}"
        try:
            r = self._client.get(url)
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Registry returned {e.response.status_code} for {cnpj_digits}")
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Registry lookup failed for {cnpj_digits}: {e}")
            return None

        return self.parse(data)

    @staticmethod
    def parse(data: dict) -> RegistryRecord:
        """Mapeia a resposta do CNPJá para RegistryRecord."""
        company = data.get("company") or {}
        address = data.get("address") or {}
        activity = data.get("mainActivity") or {}
        emails = data.get("emails") or []

        street = address.get("street")
        full_address = ""
        if street:
            full_address = (
                f"{street}, {address.get('number', '')}, {address.get('district', '')}. "
                f"CEP: {address.get('zip', '')}"
            )

        cnae = ""
        if activity.get("id") and activity.get("text"):
            cnae = f"{activity['id']} - {activity['text']}"

        email = ""
        if emails and isinstance(emails[0], dict):
            email = emails[0].get("address") or ""

        founded = data.get("founded")
        return RegistryRecord(
            legal_name=company.get("name") or "",
            state=address.get("state") or "",
            city=address.get("city") or "",
            address=full_address,
            founding_date=founded[:10] if founded else None,
            activity_code=cnae,
            email=email,
        )

    def close(self):
        self._client.close()
