from typing import List
import argparse
import aiohttp
import asyncio
import json
import logging

logger = logging.getLogger(__name__)

from social.graze.didroute.app.config import Settings, build_context, build_resolver


async def realMain() -> None:
    parser = argparse.ArgumentParser(prog="resolve", description="Resolve DIDs")
    parser.add_argument("did", nargs="+", help="The DID(s) to resolve.")
    parser.add_argument(
        "--plc-hostname",
        default=None,
        help="The PLC hostname to use for resolving did-method-plc DIDs.",
    )
    parser.add_argument(
        "--max-hops",
        type=int,
        default=None,
        help="The maximum number of deactivation redirects to follow.",
    )

    args = vars(parser.parse_args())

    overrides = {}
    if args.get("plc_hostname") is not None:
        overrides["plc_hostname"] = args["plc_hostname"]
    if args.get("max_hops") is not None:
        overrides["max_redirect_hops"] = args["max_hops"]
    settings = Settings(**overrides)  # type: ignore

    dids: List[str] = args.get("did", [])
    resolver = build_resolver(settings)

    async with aiohttp.ClientSession() as session:
        context = build_context(settings, session)
        for did in dids:
            try:
                result = await resolver.resolve(context, did)
                print(json.dumps(result.serialize(), indent=2))
            except Exception:
                logging.exception("Exception resolving did %s", did)


def main() -> None:
    asyncio.run(realMain())


if __name__ == "__main__":
    main()
