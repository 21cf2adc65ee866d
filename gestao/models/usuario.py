from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from gestao.database import Base


class Usuario(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    # Login é feito pelo username; e-mail continua único
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)

    nome = Column(String(100))
    hashed_password = Column(String(255), nullable=True)
    role = Column(String(30), nullable=False, default="pendente")
    ativo = Column(Boolean, default=True, nullable=False)

    empresa = relationship("Empresa")
