"""Dashboard runner entry point.

Boots the documents client, activates the dashboard and optionally uploads or
deletes documents, then logs the current page and the collection statistics.

Usage:
    python -m dashboard.dashboard_runner --query passport --status expired
    python -m dashboard.dashboard_runner --upload scan1.pdf scan2.pdf --document-type passport
"""

import argparse
import asyncio

from dashboard.DashboardController import DashboardController
from shared.clients.documents.DocumentsClientManager import DocumentsClientManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.document import DocumentType
from shared.models.notification import Notification, Severity
from shared.models.session import SessionContext
from shared.models.upload import UploadDefaults, UploadFile


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Document expiry dashboard")
    parser.add_argument("--query", default="", help="Search by title or description")
    parser.add_argument("--type", dest="document_type", default="", choices=[""] + [t.value for t in DocumentType])
    parser.add_argument("--status", default="", choices=["", "active", "expiring_soon", "expired"])
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument("--upload", nargs="+", default=[], metavar="FILE", help="Up to 10 files to upload")
    parser.add_argument("--title", default=None, help="Title applied to every uploaded file")
    parser.add_argument("--description", default=None)
    parser.add_argument("--document-type", default=None, choices=[t.value for t in DocumentType])
    parser.add_argument("--delete", default=None, metavar="ID", help="Delete the document with this id")
    parser.add_argument("--yes", action="store_true", help="Confirm deletes without asking")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    """Run one dashboard session."""
    args = parse_args(argv)
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    session = SessionContext(token=config.get_string_val("DASHBOARD_TOKEN", default=""))

    client = DocumentsClientManager(helper_config=config, session=session).get_client()
    dashboard = DashboardController(
        helper_config=config,
        documents_client=client,
        on_unauthenticated=lambda: logger.error("Not logged in. Set DASHBOARD_TOKEN to a valid session token."),
        confirm=lambda question: args.yes or input(f"{question} [y/N] ").strip().lower() == "y",
    )

    def _log_notification(notification: Notification) -> None:
        if notification.severity == Severity.ERROR:
            logger.error(notification.text)
        elif notification.severity == Severity.WARNING:
            logger.warning(notification.text)
        else:
            logger.info(notification.text, color="green")

    dashboard.notifications.subscribe(_log_notification)

    try:
        await client.boot()
        if not await dashboard.activate():
            return

        if args.upload:
            defaults = UploadDefaults(title=args.title, description=args.description, document_type=args.document_type)
            dashboard.uploads.build_batch([UploadFile.from_path(path) for path in args.upload], defaults)
            await dashboard.submit_upload()

        if args.delete:
            await dashboard.mutations.delete(args.delete)

        await dashboard.query.search(query=args.query, document_type=args.document_type, status=args.status, page=args.page)

        state = dashboard.query.state
        logger.info("Page %d of %d, %d documents in total.", state.page, dashboard.query.total_pages, state.total, color="cyan")
        for row in dashboard.rows():
            logger.info("[%s] %s (%s), expires %s, sections: %s", row.chip.label, row.title, row.type_label, row.expiry, "; ".join(row.section_expiries))
        if not dashboard.query.documents:
            logger.info(dashboard.empty_message())

        stats = dashboard.stats.stats
        if stats is not None:
            logger.info("Total %d | Active %d | Expiring soon %d | Expired %d", stats.total, stats.active, stats.expiring_soon, stats.expired, color="cyan")
    finally:
        await client.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
