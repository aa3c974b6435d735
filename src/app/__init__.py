"""App — orquestração e infraestrutura do endpoint de dados de Flow.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- coordinators/: pipeline do endpoint (envelope → FSM → resposta cifrada)
- services/: resolução de tenant, política de assinatura, dados de tela
- infra/: implementações concretas de IO (crypto, stores, fonte HTTP)
- protocols/: contratos/interfaces
- domain/: credencial de tenant e dados de tela
- sessions/: sessão de Flow e registros de resposta
- observability/: correlation id dos logs estruturados

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
