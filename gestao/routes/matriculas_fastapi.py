# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Matrículas.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from gestao.auth import get_admin_or_gerente
from gestao.dependencias import get_matricula_service
from gestao.models.usuario import Usuario
from gestao.schemas.matricula import (
    InativacaoRequest, MatriculaCreate, MatriculaCriada, MatriculaPaginated, MatriculaRead, MatriculaUpdate,
)
from gestao.services.matricula_service import MatriculaService

router = APIRouter(
    tags=["Matrículas"],
    responses={404: {"description": "Não encontrado"}},
)


@router.post("", response_model=MatriculaCriada, status_code=status.HTTP_201_CREATED)
def criar_matricula(dados: MatriculaCreate, service: MatriculaService = Depends(get_matricula_service)):
    """
    Cria a matrícula e a sua primeira conta a receber.
    """
    return service.criar(**dados.model_dump())


@router.get("", response_model=MatriculaPaginated)
def listar_matriculas(
    skip: int = 0,
    limit: int = 20,
    situacao: Optional[str] = None,
    aluno_id: Optional[int] = None,
    service: MatriculaService = Depends(get_matricula_service),
):
    """
    Lista as matrículas com filtros por situação e aluno.
    """
    total, matriculas = service.listar(situacao, aluno_id, skip, limit)
    return {"total": total, "matriculas": matriculas}


@router.get("/{matricula_id}", response_model=MatriculaRead)
def buscar_matricula(matricula_id: int, service: MatriculaService = Depends(get_matricula_service)):
    """
    Busca uma matrícula pelo ID.
    """
    return service.buscar_por_id(matricula_id)


@router.put("/{matricula_id}", response_model=MatriculaRead)
def atualizar_matricula(
    matricula_id: int,
    dados: MatriculaUpdate,
    service: MatriculaService = Depends(get_matricula_service),
):
    """
    Atualiza a matrícula, recalculando valores e data de término quando necessário.
    """
    return service.atualizar(matricula_id, dados.model_dump(exclude_unset=True))


@router.patch("/{matricula_id}/inativar", response_model=MatriculaRead)
def inativar_matricula(
    matricula_id: int,
    dados: InativacaoRequest,
    service: MatriculaService = Depends(get_matricula_service),
):
    """
    Inativa a matrícula. O motivo é obrigatório.
    """
    return service.inativar(matricula_id, dados.motivo)


@router.patch("/{matricula_id}/reativar", response_model=MatriculaRead)
def reativar_matricula(matricula_id: int, service: MatriculaService = Depends(get_matricula_service)):
    """
    Reativa uma matrícula inativa.
    """
    return service.reativar(matricula_id)


@router.delete("/{matricula_id}", status_code=status.HTTP_204_NO_CONTENT)
def deletar_matricula(
    matricula_id: int,
    service: MatriculaService = Depends(get_matricula_service),
    current_user: Usuario = Depends(get_admin_or_gerente),
):
    """
    Exclui a matrícula e suas contas em aberto, se nenhuma estiver paga.
    """
    service.deletar(matricula_id)
    return None
