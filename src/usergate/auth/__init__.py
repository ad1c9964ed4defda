"""Authentication and authorization.

Learn: Three pieces, layered:
1. jwt.TokenManager → issues and verifies bearer tokens (owns the secret)
2. dependencies.get_current_user → request gate, Bearer header → identity
3. access.AccessController → a caller may only mutate its own record

Passwords are bcrypt-hashed at rest (password.py).
"""
