"""
Nucleo de parsing de legislacao: HTML -> texto -> artigos -> alteracoes.

Sem I/O. Quem busca o HTML (browserless.py) e quem grava (db_writer.py)
ficam fora do nucleo e sao chamados apenas por pipeline.py.
"""

__all__ = []
