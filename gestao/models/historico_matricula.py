# gestao/models/historico_matricula.py

from sqlalchemy import Column, Integer, ForeignKey, DateTime, String, func
from sqlalchemy.orm import relationship

from gestao.database import Base


class HistoricoMatricula(Base):
    __tablename__ = 'historico_matriculas'

    id = Column(Integer, primary_key=True, index=True)
    matricula_id = Column(Integer, ForeignKey('matriculas.id'), nullable=False)
    data_alteracao = Column(DateTime, server_default=func.now())
    descricao = Column(String(255))  # Ex: "Matrícula inativada: mudou de cidade"

    matricula = relationship("Matricula", back_populates="historico")
