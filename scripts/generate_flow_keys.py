#!/usr/bin/env python3
"""Gera par de chaves RSA para o endpoint de Flow.

Uso:
    python scripts/generate_flow_keys.py
    python scripts/generate_flow_keys.py --out-dir ./keys --passphrase segredo
    python scripts/generate_flow_keys.py --tenant-id t1 --project-id meu-projeto --apply

Sem --out-dir imprime os PEMs. Com --tenant-id, rotaciona as chaves do
tenant no Firestore; padrao e dry-run (nao escreve nada sem --apply).
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from app.infra.crypto import GeneratedKeyPair, generate_key_pair

PRIVATE_KEY_FILENAME = "flow_private_key.pem"
PUBLIC_KEY_FILENAME = "flow_public_key.pem"


def write_key_pair(key_pair: GeneratedKeyPair, out_dir: Path) -> tuple[Path, Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    private_path = out_dir / PRIVATE_KEY_FILENAME
    public_path = out_dir / PUBLIC_KEY_FILENAME
    private_path.write_text(key_pair.private_key_pem, encoding="utf-8")
    private_path.chmod(0o600)
    public_path.write_text(key_pair.public_key_pem, encoding="utf-8")
    return private_path, public_path


async def rotate_in_firestore(
    tenant_id: str,
    project_id: str | None,
    *,
    collection: str,
    passphrase: str | None,
) -> str:
    """Rotaciona as chaves do tenant e retorna a nova chave pública."""
    from google.cloud import firestore

    from app.infra.stores import FirestoreTenantStore
    from app.services.key_rotation import rotate_tenant_keys

    client = firestore.Client(project=project_id) if project_id else firestore.Client()
    store = FirestoreTenantStore(client, collection=collection)
    rotated = await rotate_tenant_keys(store, tenant_id, passphrase=passphrase)
    return rotated.public_key_pem or ""


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--passphrase",
        default=None,
        help="Passphrase para cifrar a chave privada (PKCS#8).",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Diretorio onde gravar os PEMs. Se omitido, imprime no stdout.",
    )
    parser.add_argument(
        "--tenant-id",
        default=None,
        help="Tenant cujas chaves serao rotacionadas no Firestore.",
    )
    parser.add_argument(
        "--project-id",
        default=None,
        help="Project ID do Firestore. Se omitido, usa configuracao padrao.",
    )
    parser.add_argument(
        "--collection",
        default="flow_tenants",
        help="Collection de tenants no Firestore.",
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="Aplica a rotacao no Firestore. Sem esta flag executa dry-run.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if args.tenant_id:
        if not args.apply:
            print(f"[dry-run] tenant={args.tenant_id} collection={args.collection}")
            return
        public_key_pem = asyncio.run(
            rotate_in_firestore(
                args.tenant_id,
                args.project_id,
                collection=args.collection,
                passphrase=args.passphrase,
            )
        )
        print(f"[apply] tenant={args.tenant_id} rotated; register this public key:")
        print(public_key_pem)
        return

    key_pair = generate_key_pair(args.passphrase)
    if args.out_dir is not None:
        private_path, public_path = write_key_pair(key_pair, args.out_dir)
        print(f"private_key={private_path} public_key={public_path}")
        return

    print(key_pair.private_key_pem)
    print(key_pair.public_key_pem)


if __name__ == "__main__":
    main()
