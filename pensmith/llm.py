"""Completion-service transport.

complete(prompt, system=None, max_tokens=4096, config=None) -> str

Provider, model and API-key variable come from the workspace config
(PEN_MODEL may override the model). One request per call: there is no retry
or backoff, and transport errors propagate to the caller unchanged.
"""
from __future__ import annotations

from typing import Optional

import anthropic
from openai import OpenAI

from .config import PenConfig, load_config
from .context import PenError
from .env import mask_env_value, resolve_api_key, resolve_model
from .logging import breadcrumb as _breadcrumb, log_run as _log_run
from .tokenizer import count_text_tokens as _count_text_tokens

DEFAULT_MAX_TOKENS = 4096


def _complete_anthropic(api_key: str, model: str, prompt: str, system: Optional[str], max_tokens: int) -> str:
    client = anthropic.Anthropic(api_key=api_key)
    kwargs = {
        "model": model,
        "max_tokens": int(max_tokens),
        "messages": [{"role": "user", "content": prompt}],
    }
    if system:
        kwargs["system"] = system
    resp = client.messages.create(**kwargs)
    return "".join(getattr(block, "text", "") for block in resp.content if getattr(block, "type", "") == "text")


def _complete_openai(api_key: str, model: str, prompt: str, system: Optional[str], max_tokens: int) -> str:
    client = OpenAI(api_key=api_key)
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})
    resp = client.chat.completions.create(model=model, messages=messages, max_tokens=int(max_tokens))
    return resp.choices[0].message.content or ""


_PROVIDERS = {
    "anthropic": _complete_anthropic,
    "openai": _complete_openai,
}


def complete(
    prompt: str,
    *,
    system: Optional[str] = None,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    config: Optional[PenConfig] = None,
) -> str:
    cfg = config or load_config()
    call = _PROVIDERS.get(cfg.llm.provider)
    if call is None:
        raise PenError(
            f"Unknown provider: {cfg.llm.provider}. Set llm.provider to one of {', '.join(_PROVIDERS)}."
        )
    api_key = resolve_api_key(cfg)
    model = resolve_model(cfg)
    ptoks = _count_text_tokens((system or "") + prompt, model)
    _log_run(
        f"LLM request | provider={cfg.llm.provider} model={model} "
        f"{cfg.llm.api_key_env}={mask_env_value(cfg.llm.api_key_env, api_key)} "
        f"prompt_tokens~{ptoks} chars={len(prompt)} limit={max_tokens}"
    )
    _breadcrumb("llm:enter")
    out = call(api_key, model, prompt, system, max_tokens)
    _breadcrumb("llm:return")
    _log_run(f"LLM response | chars={len(out)}")
    return out
