# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN: full access to complaints, users and types
    # =====================================================
    "ADMIN": [
        "complaints:read",
        "complaints:status",
        "complaints:assign",
        "complaints:notes",

        "types:write",

        "users:read", "users:write",
    ],

    # =====================================================
    # EMPLOYEE: works the complaints assigned to them
    # =====================================================
    "EMPLOYEE": [
        "complaints:read",
        "complaints:status",
        "complaints:notes",
    ],

    # =====================================================
    # CITIZEN: reads their own complaints
    # =====================================================
    "CITIZEN": [
        "complaints:read",
    ],
}
