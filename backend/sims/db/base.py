"""
Declarative base for all SIMS models
"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
