# backend/comprebem/api/v1/api_router.py
"""
Este archivo contiene el router principal para la API versión 1.

Se encarga de registrar y configurar todos los routers de la versión 1 de la API.
Todos los routers salvo el de autenticación exigen una sesión válida.
"""

from fastapi import APIRouter, Depends

from comprebem.api import deps
from comprebem.api.v1.endpoints import (
    auth,
    clients,
    dashboard,
    orders,
    products,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL V1
# ========================================

api_router_v1 = APIRouter()

# Dependencia común de los routers protegidos
protected = [Depends(deps.get_current_session)]

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE AUTENTICACIÓN
# Inicio y cierre de sesión de la consola (sin sesión previa)
api_router_v1.include_router(
    auth.router,
    prefix="/auth",
    tags=["Auth"]
)

# ROUTER DE CLIENTES
api_router_v1.include_router(
    clients.router,
    prefix="/clients",
    tags=["Clients"],
    dependencies=protected
)

# ROUTER DE PRODUCTOS
api_router_v1.include_router(
    products.router,
    prefix="/products",
    tags=["Products"],
    dependencies=protected
)

# ROUTER DE PEDIDOS
# Creación y edición a través del servicio de composición de pedidos
api_router_v1.include_router(
    orders.router,
    prefix="/orders",
    tags=["Orders"],
    dependencies=protected
)

# ROUTER DEL DASHBOARD
api_router_v1.include_router(
    dashboard.router,
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=protected
)
