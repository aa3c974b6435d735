"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests da plataforma de Flows
- Ler corpo bruto e headers (assinatura, tenant explícito, correlation id)
- Mapear erros de domínio em status HTTP

Subpastas:
- routes/: endpoints HTTP (flows, health)

NÃO PODE conter: FSM, regras de sessão, criptografia, resolução de tenant.
"""
