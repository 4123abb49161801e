"""Connection descriptors for provisioned bindings."""

from __future__ import annotations

from urllib.parse import quote_plus

from .models import POSTGRESQL_PORT, POSTGRESQL_TAG, BindingDetails, Credentials

URI_TEMPLATE = "postgresql://{user}:{password}@{host}:{port}/{database}"
JDBC_TEMPLATE = "jdbc:postgresql://{host}:{port}/{database}?user={user}&password={password}"
SSL_SUFFIX = "&sslmode=require"


def create_credential(
    fqdn: str,
    ssl_required: bool,
    server_name: str,
    database_name: str,
    binding_details: BindingDetails,
) -> Credentials:
    """Build the credentials handed to the consumer of a binding.

    The username takes the ``<login>@<server>`` form this server family
    authenticates with. Both username and password are query-escaped before
    they are embedded, since the username always carries an ``@``.
    """

    username = f"{binding_details.login_name}@{server_name}"
    password = binding_details.password
    escaped_user = _escape(username)
    escaped_password = _escape(password.get_secret_value())

    uri = URI_TEMPLATE.format(
        user=escaped_user,
        password=escaped_password,
        host=fqdn,
        port=POSTGRESQL_PORT,
        database=database_name,
    )
    jdbc = JDBC_TEMPLATE.format(
        host=fqdn,
        port=POSTGRESQL_PORT,
        database=database_name,
        user=escaped_user,
        password=escaped_password,
    )
    if ssl_required:
        uri += "?" + SSL_SUFFIX
        jdbc += SSL_SUFFIX

    return Credentials(
        host=fqdn,
        port=POSTGRESQL_PORT,
        database=database_name,
        username=username,
        password=password,
        ssl_required=ssl_required,
        uri=uri,
        jdbc=jdbc,
        tags=(POSTGRESQL_TAG,),
    )


def _escape(value: str) -> str:
    # Only unreserved characters stay literal; spaces become "+".
    return quote_plus(value, safe="")


__all__ = ["create_credential"]
