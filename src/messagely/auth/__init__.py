"""Authentication and authorization.

Three pieces:
1. password.PasswordHasher: bcrypt hashing and timing-safe verification
2. jwt.SessionIssuer: stateless signed bearer tokens (username in `sub`)
3. guard: pure predicates deciding who may view / mark-read a message

dependencies.py wires 1 and 2 into FastAPI and resolves the requesting
username on every protected route.
"""
