"""Reference bindings for specific vendor APIs.

- gitlab: GitLab REST API (OAuth password grant, personal access tokens)
- sensu: Sensu API (no authentication)
- vault: HashiCorp Vault (LDAP login, X-Vault-Token)

"""

from rest_harness.bindings.gitlab import GitlabClient
from rest_harness.bindings.sensu import SensuClient
from rest_harness.bindings.vault import VaultClient

BINDINGS = {
    "gitlab": GitlabClient,
    "sensu": SensuClient,
    "vault": VaultClient,
}

__all__ = [
    "BINDINGS",
    "GitlabClient",
    "SensuClient",
    "VaultClient",
]
