import argparse
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from steamdeploy.lib.config import SteamConfig
from steamdeploy.lib.errors import ExitCode, TaskError
from steamdeploy.lib.notifications import NotificationService
from steamdeploy.lib.streams import LogStream
from steamdeploy.lib.steam import AppManifestParams, SteamAuthTask, SteamUploader, SteamVDFBuilder, TaskContext
from steamdeploy.lib.steam.auth import DEFAULT_CONFIG_VDF_ENV_VAR

# ===============================================================
# Argument Parsing
# ===============================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="steamdeploy",
        description="Steam build tasks: load steamcmd credentials, write app manifests, upload builds.",
    )
    parser.add_argument("--root-dir", help="Directory relative manifest paths are resolved against (default: cwd)")
    parser.add_argument("--stream-name", help="Valkey stream to log to (default: steam_task:<task>)")
    parser.add_argument("--no-stream", action="store_true", help="Only log to the console")

    tasks = parser.add_subparsers(dest="task", required=True)

    auth = tasks.add_parser("auth", help="Extract the steamcmd config.vdf bundle from the environment")
    auth.add_argument("--config-vdf-env-var", default=DEFAULT_CONFIG_VDF_ENV_VAR,
                      help="Environment variable holding the base64 encoded config zip")

    manifest = tasks.add_parser("create-app-manifest", help="Write a SteamPipe app build manifest")
    manifest.add_argument("--app-id", type=int, required=True)
    manifest.add_argument("--build-description", default="")
    manifest.add_argument("--content-root-dir", required=True)
    manifest.add_argument("--depot1-local-dir", required=True)
    manifest.add_argument("--depot1-depot-path", default="")
    manifest.add_argument("--release-branch", required=True)
    manifest.add_argument("--manifest-output-file", required=True)
    manifest.add_argument("--build-output-dir", default="BuildOutput")
    manifest.add_argument("--tag", default="", help="Tags for the manifest, e.g. '#SteamManifest;#Deploy'")

    deploy = tasks.add_parser("deploy-build", help="Upload a build with steamcmd")
    deploy.add_argument("--username", required=True)
    deploy.add_argument("--app-manifest-file", required=True)

    return parser

# ===============================================================
# Task Handlers
# ===============================================================

def run_auth(args: argparse.Namespace, config: SteamConfig, stream: LogStream, context: TaskContext) -> None:
    task = SteamAuthTask(config, stream, config_vdf_env_var=args.config_vdf_env_var)
    task.execute(context)


def run_create_app_manifest(args: argparse.Namespace, config: SteamConfig, stream: LogStream, context: TaskContext) -> None:
    params = AppManifestParams(
        app_id=args.app_id,
        build_description=args.build_description,
        content_root_dir=config.resolve_file(args.content_root_dir),
        depot1_local_dir=args.depot1_local_dir,
        depot1_depot_path=args.depot1_depot_path,
        release_branch=args.release_branch,
        manifest_output_file=args.manifest_output_file,
        build_output_dir=args.build_output_dir,
        tag=args.tag,
    )
    SteamVDFBuilder(params, config, stream).build_vdf(context)


def run_deploy_build(args: argparse.Namespace, config: SteamConfig, stream: LogStream, context: TaskContext) -> None:
    notification_service = NotificationService(config)
    result: Dict[str, Any] = {
        "task": args.task,
        "app_manifest": args.app_manifest_file,
        "startedAt": datetime.now(timezone.utc).isoformat(),
    }
    try:
        uploader = SteamUploader(args.username, args.app_manifest_file, config, stream)
        result.update(uploader.upload_build())
    except TaskError as e:
        result["completedAt"] = datetime.now(timezone.utc).isoformat()
        notification_service.send_deploy_notification(result, 'failed', str(e))
        raise

    result["completedAt"] = datetime.now(timezone.utc).isoformat()
    notification_service.send_deploy_notification(result, 'completed')


TASK_HANDLERS = {
    "auth": run_auth,
    "create-app-manifest": run_create_app_manifest,
    "deploy-build": run_deploy_build,
}

# ===============================================================
# Entry Point
# ===============================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Run one task and return its exit code."""
    args = build_parser().parse_args(argv)
    stream_name = args.stream_name or f"steam_task:{args.task}"

    try:
        config = SteamConfig.from_env(root_dir=args.root_dir)
    except TaskError as e:
        print(f"Task {args.task} failed: {str(e)}", file=sys.stderr)
        return int(e.exit_code)

    stream = LogStream(stream_name) if args.no_stream else LogStream.from_config(stream_name, config)
    context = TaskContext()

    try:
        TASK_HANDLERS[args.task](args, config, stream, context)
    except TaskError as e:
        stream.log(f"Task {args.task} failed: {str(e)}", level="error")
        return int(e.exit_code)

    for product in sorted(context.build_products):
        stream.log(f"Build product: {product}")
    for tag_name, files in sorted(context.tag_sets.items()):
        stream.log(f"Tag {tag_name}: {', '.join(str(f) for f in sorted(files))}")

    stream.log(f"Task {args.task} succeeded")
    return int(ExitCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
