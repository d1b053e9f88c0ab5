"""PromptLab UI entrypoint."""
from __future__ import annotations

import argparse
import logging
import os
from functools import partial
from typing import Sequence

import gradio as gr

from .clients.openrouter import OpenRouterClient
from .config import RootConfig, default_config, load_config
from .controller import PromptLabController
from .history import format_history_markdown
from .registry import PromptRegistry
from .ui.state import SessionState

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PromptLab UI")
    parser.add_argument("--config", default="configs/promptlab.yaml")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--title")
    parser.add_argument("--concurrency-limit", type=int)
    parser.add_argument("--api-base-url")
    parser.add_argument("--log-level")
    parser.add_argument("--api-key-env", help="Environment variable used to pre-fill the API key")
    parser.add_argument("--share", action="store_true")
    return parser.parse_args(argv)


def load_root_config(path: str) -> RootConfig:
    if not os.path.exists(path):
        return default_config()
    return load_config(path)


def apply_overrides(cfg: RootConfig, args: argparse.Namespace) -> RootConfig:
    if args.title:
        cfg.app.title = args.title
    if args.host:
        cfg.app.host = args.host
    if args.port is not None:
        cfg.app.port = args.port
    if args.concurrency_limit is not None:
        cfg.app.concurrency_limit = args.concurrency_limit
    if args.api_base_url:
        cfg.api.base_url = args.api_base_url
    if args.log_level:
        cfg.app.log_level = args.log_level.upper()
    return cfg


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def start_session(controller: PromptLabController, state: SessionState, credential: str):
    controller.set_credential(state, credential)
    controller.load_models(state)
    known = {model.id for model in state.models}
    value = state.selected_model_id if state.selected_model_id in known else None
    return (
        state,
        gr.update(choices=state.model_choices(), value=value),
        format_history_markdown(state.history.entries()),
    )


def handle_prompt_change(controller: PromptLabController, state: SessionState, prompt_id: str):
    controller.select_prompt(state, prompt_id)
    return (
        state,
        state.current_template,
        state.current_input,
        gr.update(choices=controller.registry.sample_choices(prompt_id), value=None),
    )


def handle_sample_change(
    controller: PromptLabController, state: SessionState, sample: str | None, current_input: str
):
    if not sample:
        return state, current_input
    controller.select_sample(state, sample)
    return state, state.current_input


def _sync_fields(
    controller: PromptLabController,
    state: SessionState,
    credential: str,
    model_id: str | None,
    prompt_id: str | None,
    user_input: str,
    template: str,
) -> None:
    controller.set_credential(state, credential)
    controller.set_model(state, model_id)
    controller.set_prompt_id(state, prompt_id)
    controller.set_input(state, user_input)
    controller.set_template(state, template)


def handle_run(
    controller: PromptLabController,
    state: SessionState,
    credential: str,
    model_id: str | None,
    prompt_id: str | None,
    user_input: str,
    template: str,
):
    _sync_fields(controller, state, credential, model_id, prompt_id, user_input, template)
    controller.run_simulation(state)
    return state, state.last_output, format_history_markdown(state.history.entries())


def handle_improve(
    controller: PromptLabController,
    state: SessionState,
    credential: str,
    model_id: str | None,
    prompt_id: str | None,
    user_input: str,
    template: str,
    feedback: str,
):
    _sync_fields(controller, state, credential, model_id, prompt_id, user_input, template)
    controller.set_feedback(state, feedback)
    controller.improve_prompt(state)
    return (
        state,
        state.current_template,
        state.pending_feedback,
        format_history_markdown(state.history.entries()),
    )


def build_app(cfg: RootConfig, args: argparse.Namespace) -> gr.Blocks:
    registry = PromptRegistry(cfg.prompts)
    client = OpenRouterClient(base_url=cfg.api.base_url, timeout=cfg.api.request_timeout_s)
    controller = PromptLabController(registry, client, notify=gr.Warning)
    initial_key = os.environ.get(args.api_key_env, "") if args.api_key_env else ""
    first = controller.new_session()

    def _new_session() -> SessionState:
        # one state per browser session, created on every page load
        state = controller.new_session()
        controller.set_credential(state, initial_key)
        return state

    with gr.Blocks(title=cfg.app.title) as demo:
        session = gr.State(_new_session)
        gr.Markdown(f"# {cfg.app.title}")

        api_key = gr.Textbox(
            label="OpenRouter API Key",
            type="password",
            value=initial_key,
            placeholder="OpenRouter API Key",
        )
        with gr.Row():
            prompt_dd = gr.Dropdown(
                label="Prompt",
                choices=registry.list_ids(),
                value=first.selected_prompt_id,
            )
            model_dd = gr.Dropdown(label="Model", choices=[], value=None)
            sample_dd = gr.Dropdown(
                label="Sample Data",
                choices=registry.sample_choices(first.selected_prompt_id),
                value=None,
            )
        run_btn = gr.Button("Run Sim", variant="primary")

        with gr.Row():
            input_tb = gr.Textbox(
                label="Input Data",
                lines=12,
                placeholder="Enter input data or select sample",
            )
            template_tb = gr.Textbox(label="Prompt", lines=12, value=first.current_template)
            with gr.Column():
                output_tb = gr.Textbox(
                    label="Output",
                    lines=6,
                    interactive=False,
                    placeholder="Output will appear here",
                )
                feedback_tb = gr.Textbox(
                    label="Feedback",
                    lines=3,
                    placeholder="Type your feedback here...",
                )
                improve_btn = gr.Button("Submit Feedback & Improve Prompt")

        gr.Markdown("## Action History")
        history_md = gr.Markdown(format_history_markdown([]))

        demo.load(
            partial(start_session, controller),
            inputs=[session, api_key],
            outputs=[session, model_dd, history_md],
        )
        prompt_dd.change(
            partial(handle_prompt_change, controller),
            inputs=[session, prompt_dd],
            outputs=[session, template_tb, input_tb, sample_dd],
        )
        sample_dd.change(
            partial(handle_sample_change, controller),
            inputs=[session, sample_dd, input_tb],
            outputs=[session, input_tb],
        )
        run_btn.click(
            partial(handle_run, controller),
            inputs=[session, api_key, model_dd, prompt_dd, input_tb, template_tb],
            outputs=[session, output_tb, history_md],
        )
        improve_btn.click(
            partial(handle_improve, controller),
            inputs=[session, api_key, model_dd, prompt_dd, input_tb, template_tb, feedback_tb],
            outputs=[session, template_tb, feedback_tb, history_md],
        )

    return demo


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = load_root_config(args.config)
    cfg = apply_overrides(cfg, args)
    configure_logging(cfg.app.log_level)
    logger.info("Starting %s with %d prompts", cfg.app.title, len(cfg.prompts))

    app = build_app(cfg, args)
    app.queue(default_concurrency_limit=cfg.app.concurrency_limit)
    app.launch(server_name=cfg.app.host, server_port=cfg.app.port, share=args.share)


if __name__ == "__main__":
    main()
