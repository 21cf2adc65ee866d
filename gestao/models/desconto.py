from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint

from gestao.database import Base
from gestao.models.enums import StatusCadastro, TipoDesconto, enum_coluna


class Desconto(Base):
    __tablename__ = "descontos"
    __table_args__ = (UniqueConstraint("empresa_id", "descricao", name="uq_desconto_descricao_empresa"),)

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    descricao = Column(String(100), nullable=False)
    tipo = Column(enum_coluna(TipoDesconto), nullable=False)
    valor = Column(Numeric(10, 2), nullable=False)  # percentual (0-100) ou valor em reais
    status = Column(enum_coluna(StatusCadastro), nullable=False, default=StatusCadastro.ATIVO)
