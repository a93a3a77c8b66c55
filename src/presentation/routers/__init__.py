"""HTTP routers synthesized from the OpenAPI document.

Routes are not declared in code; see routers.api.routes.generator.
"""
