"""
Client for the Company Registry API.

Usage:
    client = CompanyClient("http://localhost:8080", token=writer_token)
    company = client.create_company(name="Acme", employee_count=10, legal_type="Corporations")
    client.update_company(company["id"], employee_count=12)
"""

import requests
from typing import Any, Dict, Optional


class CompanyAPIError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class CompanyClient:
    """
    Thin wrapper around requests.Session for the company endpoints.
    """

    def __init__(self, api_url: str = "http://localhost:8080", token: Optional[str] = None):
        """
        Args:
            api_url: Base URL of the API server
            token: Bearer token sent with every company request
        """
        self.api_url = api_url.rstrip('/')
        self.session = requests.Session()
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, endpoint: str, payload: Dict = None) -> requests.Response:
        url = f"{self.api_url}{endpoint}"
        response = self.session.request(method, url, json=payload)
        if not response.ok:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise CompanyAPIError(response.status_code, message)
        return response

    # ----------------------------------------------------------------
    # Health
    # ----------------------------------------------------------------

    def alive(self) -> bool:
        return self._request("GET", "/alive").text == "ok"

    # ----------------------------------------------------------------
    # Companies
    # ----------------------------------------------------------------

    def create_company(
        self,
        name: str,
        legal_type: str,
        description: str = "",
        employee_count: int = 0,
        is_registered: bool = False,
    ) -> Dict[str, Any]:
        """
        Create a company.

        Returns:
            The created company, including its generated id
        """
        payload = {
            "name": name,
            "description": description,
            "employee_count": employee_count,
            "is_registered": is_registered,
            "type": legal_type,
        }
        return self._request("POST", "/api/v1/company", payload).json()

    def update_company(
        self,
        company_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        employee_count: Optional[int] = None,
        is_registered: Optional[bool] = None,
        legal_type: Optional[str] = None,
    ) -> None:
        """Send only the fields that are not None."""
        fields = {
            "name": name,
            "description": description,
            "employee_count": employee_count,
            "is_registered": is_registered,
            "type": legal_type,
        }
        payload = {k: v for k, v in fields.items() if v is not None}
        self._request("PATCH", f"/api/v1/company/{company_id}", payload)

    def delete_company(self, company_id: str) -> None:
        self._request("DELETE", f"/api/v1/company/{company_id}")

    def get_company(self, company_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/company/{company_id}").json()
