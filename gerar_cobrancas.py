import argparse
import logging
import sys
from datetime import datetime

from gestao import models  # noqa: F401
from gestao.jobs.scheduler import executar_atualizacao_vencidas, executar_cobrancas

# Configuração básica de logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def main(argv=None):
    """
    Gera as cobranças recorrentes (e opcionalmente atualiza as contas vencidas).
    Por padrão usa a data de hoje e todas as empresas ativas.
    """
    parser = argparse.ArgumentParser(description='Gerador de Cobranças Recorrentes')
    parser.add_argument('--data', help='Data de referência no formato YYYY-MM-DD')
    parser.add_argument('--empresa', type=int, help='ID da empresa (padrão: todas as ativas)')
    parser.add_argument('--vencidas', action='store_true', help='Também marca as contas vencidas')
    args = parser.parse_args(argv)

    data_referencia = None
    if args.data:
        try:
            data_referencia = datetime.strptime(args.data, "%Y-%m-%d").date()
            logging.info(f"MODO MANUAL: gerando cobranças com referência {data_referencia}")
        except ValueError:
            logging.error("Data inválida fornecida nos parâmetros (use YYYY-MM-DD).")
            return 2

    resultados = executar_cobrancas(data_referencia, empresa_id=args.empresa)
    falhas = 0
    for empresa_id, resultado in resultados.items():
        if "erro" in resultado:
            falhas += 1
            continue
        logging.info(
            f"Empresa {empresa_id}: {resultado['geradas']} geradas, {resultado['existentes']} existentes, "
            f"{resultado['ignoradas']} ignoradas, {resultado['erros']} erros"
        )
        for detalhe in resultado["detalhes"]:
            if detalhe["status"] == "erro":
                logging.warning(f"-> ERRO: matrícula {detalhe['codigo']}: {detalhe['erro']}")

    if args.vencidas:
        for empresa_id, resultado in executar_atualizacao_vencidas(empresa_id=args.empresa).items():
            logging.info(f"Empresa {empresa_id}: contas vencidas {resultado}")

    return 1 if falhas else 0


if __name__ == "__main__":
    sys.exit(main())
