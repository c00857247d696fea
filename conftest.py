import os

# bcrypt's minimum cost keeps the suite fast; must be set before config loads.
os.environ.setdefault('AUTH_BCRYPT_ROUNDS', '4')
os.environ.setdefault('AUTH_DATABASE_URI', 'sqlite:///:memory:')
