"""
기프트 카드 지갑 CLI

사용법:
    python -m scripts.wallet add --store shufersal --number 1234567890 --amount 50 --expires 2031-01-01
    python -m scripts.wallet set-amount <card_id> 12.50
    python -m scripts.wallet list --all
    python -m scripts.wallet show <card_id>
    python -m scripts.wallet export --output backup.json
    python -m scripts.wallet import backup.json
    python -m scripts.wallet clear --yes
"""

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema, resolve_db_path
from core.config.loader import SettingsLoadError, get_settings
from core.domain.card import Card
from core.errors import LedgerError
from core.ledger import (
    AmountUpdateRequest,
    LedgerService,
    NewCardRequest,
    backup_file_name,
    dump_export,
)
from core.logging import setup_logging
from core.storage.record_store import RecordStore
from core.utils.money import format_minor
from core.utils.timezone import parse_date, to_iso

logger = logging.getLogger(__name__)

PROCESS_NAME = "wallet"


@asynccontextmanager
async def open_ledger(db_path: Path | str) -> AsyncIterator[LedgerService]:
    """DB 연결 → 스키마 초기화 → LedgerService 생성 (종료 시 연결 해제)"""
    async with SQLiteAdapter(resolve_db_path(db_path)) as db:
        await init_schema(db)
        yield LedgerService(RecordStore(db))


def mask_number(number: str) -> str:
    """카드 번호 마스킹 (마지막 4자리만 표시)"""
    return number[-4:].rjust(len(number), "*")


def format_card(card: Card) -> str:
    """카드 한 줄 요약"""
    line = (
        f"{card.id}  {card.store_id:<16} {mask_number(card.number):<20} "
        f"{format_minor(card.amount_minor, card.currency):>14}  "
        f"exp {card.expiration_date.isoformat()}"
    )
    if card.nickname:
        line += f"  ({card.nickname})"
    if card.is_archived:
        line += "  [ARCHIVED]"
    return line


# -------------------------------------------------------------------------
# 명령 핸들러
# -------------------------------------------------------------------------

async def cmd_add(ledger: LedgerService, args: argparse.Namespace) -> int:
    request = NewCardRequest.from_major(
        args.amount,
        store_id=args.store,
        number=args.number,
        expiration_date=parse_date(args.expires),
        currency=args.currency or get_settings().default_currency,
        nickname=args.nickname or "",
        notes=args.notes,
    )
    card = await ledger.create(request)
    print(format_card(card))
    return 0


async def cmd_set_amount(ledger: LedgerService, args: argparse.Namespace) -> int:
    request = AmountUpdateRequest.from_major(args.amount)
    card = await ledger.update_amount(args.card_id, request.amount_minor)
    print(format_card(card))
    return 0


async def cmd_mark_empty(ledger: LedgerService, args: argparse.Namespace) -> int:
    card = await ledger.mark_empty(args.card_id)
    print(format_card(card))
    return 0


async def cmd_archive(ledger: LedgerService, args: argparse.Namespace) -> int:
    card = await ledger.archive(args.card_id)
    print(format_card(card))
    return 0


async def cmd_restore(ledger: LedgerService, args: argparse.Namespace) -> int:
    card = await ledger.restore(args.card_id)
    print(format_card(card))
    return 0


async def cmd_delete(ledger: LedgerService, args: argparse.Namespace) -> int:
    await ledger.delete(args.card_id)
    print(f"Deleted {args.card_id}")
    return 0


async def cmd_list(ledger: LedgerService, args: argparse.Namespace) -> int:
    cards = await ledger.list_cards(include_archived=args.all)
    if not cards:
        print("No cards")
        return 0
    for card in cards:
        print(format_card(card))
    return 0


async def cmd_show(ledger: LedgerService, args: argparse.Namespace) -> int:
    card = await ledger.get_by_id(args.card_id)
    if card is None:
        print(f"Card not found: {args.card_id}", file=sys.stderr)
        return 1

    print(format_card(card))
    print(f"  number: {card.number}")
    if card.notes:
        print(f"  notes: {card.notes}")

    for event in await ledger.get_history(card.id):
        delta = ""
        if event.delta_amount_minor is not None:
            delta = f"  {event.delta_amount_minor:+d}"
        print(f"  {to_iso(event.created_at)}  {event.type.value}{delta}")
    return 0


async def cmd_export(ledger: LedgerService, args: argparse.Namespace) -> int:
    payload = await ledger.export_backup()
    output = Path(args.output) if args.output else Path(backup_file_name())
    output.write_text(dump_export(payload), encoding="utf-8")
    print(f"Exported {len(payload['cards'])} cards to {output}")
    return 0


async def cmd_import(ledger: LedgerService, args: argparse.Namespace) -> int:
    text = Path(args.path).read_text(encoding="utf-8")
    summary = await ledger.import_backup(text)
    print(
        f"Import successful: {summary.cards_added} cards, "
        f"{summary.events_added} events added"
    )
    return 0


async def cmd_clear(ledger: LedgerService, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to clear all data without --yes", file=sys.stderr)
        return 1
    await ledger.clear_all()
    print("All data cleared")
    return 0


# -------------------------------------------------------------------------
# 진입점
# -------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wallet", description="Gift card wallet")
    parser.add_argument("--settings", type=Path, default=None, help="settings.yaml 경로")
    parser.add_argument("--db", default=None, help="DB 경로 (settings.yaml보다 우선)")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="카드 추가")
    add.add_argument("--store", required=True)
    add.add_argument("--number", required=True)
    add.add_argument("--amount", required=True, help="금액 (예: 50.00)")
    add.add_argument("--expires", required=True, help="만료일 YYYY-MM-DD")
    add.add_argument("--currency", default=None)
    add.add_argument("--nickname", default=None)
    add.add_argument("--notes", default=None)
    add.set_defaults(handler=cmd_add)

    set_amount = sub.add_parser("set-amount", help="잔액 변경")
    set_amount.add_argument("card_id")
    set_amount.add_argument("amount")
    set_amount.set_defaults(handler=cmd_set_amount)

    for name, handler, help_text in (
        ("mark-empty", cmd_mark_empty, "잔액 0 처리"),
        ("archive", cmd_archive, "보관"),
        ("restore", cmd_restore, "보관 해제"),
        ("delete", cmd_delete, "영구 삭제"),
        ("show", cmd_show, "카드 상세 및 이력"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("card_id")
        cmd.set_defaults(handler=handler)

    list_cmd = sub.add_parser("list", help="카드 목록")
    list_cmd.add_argument("--all", action="store_true", help="보관된 카드 포함")
    list_cmd.set_defaults(handler=cmd_list)

    export = sub.add_parser("export", help="백업 내보내기")
    export.add_argument("--output", default=None)
    export.set_defaults(handler=cmd_export)

    import_cmd = sub.add_parser("import", help="백업 가져오기 (병합)")
    import_cmd.add_argument("path")
    import_cmd.set_defaults(handler=cmd_import)

    clear = sub.add_parser("clear", help="모든 데이터 삭제")
    clear.add_argument("--yes", action="store_true")
    clear.set_defaults(handler=cmd_clear)

    return parser


async def run(args: argparse.Namespace) -> int:
    settings = get_settings(args.settings)
    db_path = args.db or settings.db_path

    async with open_ledger(db_path) as ledger:
        return await args.handler(ledger, args)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings(args.settings)
        setup_logging(PROCESS_NAME, file_level=settings.log_level)
        return asyncio.run(run(args))
    except (LedgerError, SettingsLoadError, ValueError, OSError) as e:
        logger.error("명령 실패", extra={"command": args.command, "error": str(e)})
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
