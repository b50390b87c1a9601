"""E-mail templates sent to guests, rendered in the request language."""

from ordering.shared.language import Language


class VerificationCodeTemplate:
    _subjects = {
        Language.EN: "Email verification",
        Language.RU: "Подтверждение адреса электронной почты",
        Language.HY: "Էլ. հասցեի հաստատում",
    }
    _bodies = {
        Language.EN: "Your verification code is {code}",
        Language.RU: "Ваш код подтверждения: {code}",
        Language.HY: "Ձեր հաստատման կոդն է՝ {code}",
    }

    @classmethod
    def render(cls, context: dict, language: Language = Language.EN) -> dict:
        return {
            "subject": cls._subjects[language],
            "body": cls._bodies[language].format(code=context["code"]),
        }


class OrderCreatedTemplate:
    _subjects = {
        Language.EN: "Order #{code} is created",
        Language.RU: "Заказ #{code} создан",
        Language.HY: "Պատվեր #{code}-ը ստեղծված է",
    }
    _bodies = {
        Language.EN: "Dear {name}, thank you for your order. Use code {code} to track it. Total: {total} drams.",
        Language.RU: "Уважаемый(ая) {name}, спасибо за заказ. Код для отслеживания: {code}. Сумма: {total} драмов.",
        Language.HY: "Հարգելի {name}, շնորհակալություն պատվերի համար։ Հետևելու կոդը՝ {code}։ Ընդհանուր՝ {total} դրամ։",
    }

    @classmethod
    def render(cls, context: dict, language: Language = Language.EN) -> dict:
        code = context["code"]
        return {
            "subject": cls._subjects[language].format(code=code),
            "body": cls._bodies[language].format(
                name=context.get("name") or "", code=code, total=context.get("total", "")
            ),
        }


class OrderCanceledTemplate:
    _subjects = {
        Language.EN: "Order #{code} is canceled",
        Language.RU: "Заказ #{code} отменён",
        Language.HY: "Պատվեր #{code}-ը չեղարկված է",
    }
    _bodies = {
        Language.EN: "Your order #{code} has been canceled. Reason: {reason}",
        Language.RU: "Ваш заказ #{code} отменён. Причина: {reason}",
        Language.HY: "Ձեր #{code} պատվերը չեղարկվել է։ Պատճառը՝ {reason}",
    }

    @classmethod
    def render(cls, context: dict, language: Language = Language.EN) -> dict:
        code = context["code"]
        return {
            "subject": cls._subjects[language].format(code=code),
            "body": cls._bodies[language].format(code=code, reason=context.get("reason") or "-"),
        }
