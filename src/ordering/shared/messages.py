"""User-facing messages in English, Russian and Armenian.

Business-rule failures are returned to the client as text in the request
language, so every rejection reason has an entry here.
"""

from enum import Enum

from ordering.shared.language import Language


class Message(Enum):
    PROMO_CODE_NOT_FOUND = "promo_code_not_found"
    PROMO_CODE_ALREADY_USED = "promo_code_already_used"
    PROMO_CODE_BELOW_MINIMUM = "promo_code_below_minimum"
    PROMO_CODE_ABOVE_MAXIMUM = "promo_code_above_maximum"
    PROMO_CODE_SHIPPING_ALREADY_FREE = "promo_code_shipping_already_free"
    PROMO_CODE_TAKEN = "promo_code_taken"
    PROMO_CODE_TOO_SHORT = "promo_code_too_short"
    PROMO_CODE_AVAILABLE = "promo_code_available"
    BONUS_NOT_ALLOWED = "bonus_not_allowed"
    BONUS_EXCEEDS_BALANCE = "bonus_exceeds_balance"
    BONUS_EXCEEDS_CAP = "bonus_exceeds_cap"
    DELIVERY_ADDRESS_REQUIRED = "delivery_address_required"
    WRONG_PRODUCTS = "wrong_products"
    EMPTY_CART = "empty_cart"
    WRONG_EMAIL = "wrong_email"
    WRONG_CODE = "wrong_code"
    EMAIL_BELONGS_TO_CUSTOMER = "email_belongs_to_customer"
    VERIFICATION_CODE_SENT = "verification_code_sent"
    EMAIL_VERIFIED = "email_verified"
    ORDER_NOT_FOUND = "order_not_found"
    ORDER_CREATED = "order_created"
    ORDER_SET_TO_REVIEW = "order_set_to_review"
    ORDER_CANCELED = "order_canceled"
    ORDER_FINISHED = "order_finished"
    TRANSITION_NOT_ALLOWED = "transition_not_allowed"


_CATALOGUE: dict[Message, dict[Language, str]] = {
    Message.PROMO_CODE_NOT_FOUND: {
        Language.EN: "Promo code does not exist",
        Language.RU: "Промо-код не существует",
        Language.HY: "Պրոմո կոդը գոյություն չունի",
    },
    Message.PROMO_CODE_ALREADY_USED: {
        Language.EN: "Promo code is already used",
        Language.RU: "Промо код уже использован",
        Language.HY: "Պրոմո կոդն արդեն իսկ օգտագործված է",
    },
    Message.PROMO_CODE_BELOW_MINIMUM: {
        Language.EN: "The price of Your order must be more than {min_price} drams to use this promo code",
        Language.RU: "Для использования этого промо-кода цена Вашего заказа должна быть более {min_price} драмов",
        Language.HY: "Պրոմո կոդն օգտագործելու համար Ձեր պատվերի գինը պետք է գերազանցի {min_price} դրամը",
    },
    Message.PROMO_CODE_ABOVE_MAXIMUM: {
        Language.EN: "The price of Your order must be less than {max_price} drams to use this promo code",
        Language.RU: "Для использования этого промо-кода цена Вашего заказа должна быть менее {max_price} драмов",
        Language.HY: "Պրոմո կոդն օգտագործելու համար Ձեր պատվերի գինը չպետք է գերազանցի {max_price} դրամը",
    },
    Message.PROMO_CODE_SHIPPING_ALREADY_FREE: {
        Language.EN: "Promo code cannot be used, because shipping is already free",
        Language.RU: "Промо-код не может быть использован, потому что доставка уже бесплатна",
        Language.HY: "Պրոմո կոդը չի կարող օգտագործվել, քանի որ առաքումն արդեն իսկ անվճար է",
    },
    Message.PROMO_CODE_TAKEN: {
        Language.EN: "Promo code is already taken",
        Language.RU: "Промо-код уже занят",
        Language.HY: "Պրոմո կոդն արդեն զբաղված է",
    },
    Message.PROMO_CODE_TOO_SHORT: {
        Language.EN: "Promo code must have at least {min_length} characters",
        Language.RU: "Промо-код должен содержать не менее {min_length} символов",
        Language.HY: "Պրոմո կոդը պետք է պարունակի առնվազն {min_length} նիշ",
    },
    Message.PROMO_CODE_AVAILABLE: {
        Language.EN: "Promo code is available",
        Language.RU: "Промо-код доступен",
        Language.HY: "Պրոմո կոդը հասանելի է",
    },
    Message.BONUS_NOT_ALLOWED: {
        Language.EN: "Bonus points can only be used by registered users",
        Language.RU: "Бонусы могут использовать только зарегистрированные пользователи",
        Language.HY: "Բոնուսները կարող են օգտագործել միայն գրանցված օգտատերերը",
    },
    Message.BONUS_EXCEEDS_BALANCE: {
        Language.EN: "Too high bonus amount",
        Language.RU: "Слишком большое количество бонусов",
        Language.HY: "Բոնուսների քանակը չափազանց մեծ է",
    },
    Message.BONUS_EXCEEDS_CAP: {
        Language.EN: "Wrong bonus amount",
        Language.RU: "Неверное количество бонусов",
        Language.HY: "Բոնուսների սխալ քանակ",
    },
    Message.DELIVERY_ADDRESS_REQUIRED: {
        Language.EN: "Delivery address is required",
        Language.RU: "Необходимо указать адрес доставки",
        Language.HY: "Առաքման հասցեն պարտադիր է",
    },
    Message.WRONG_PRODUCTS: {
        Language.EN: "Some products are no longer available",
        Language.RU: "Некоторые товары больше недоступны",
        Language.HY: "Որոշ ապրանքներ այլևս հասանելի չեն",
    },
    Message.EMPTY_CART: {
        Language.EN: "Cart is empty",
        Language.RU: "Корзина пуста",
        Language.HY: "Զամբյուղը դատարկ է",
    },
    Message.WRONG_EMAIL: {
        Language.EN: "Wrong email",
        Language.RU: "Неверный адрес электронной почты",
        Language.HY: "Սխալ էլ. հասցե",
    },
    Message.WRONG_CODE: {
        Language.EN: "Wrong code",
        Language.RU: "Неверный код",
        Language.HY: "Սխալ կոդ",
    },
    Message.EMAIL_BELONGS_TO_CUSTOMER: {
        Language.EN: "A registered user with this email already exists, please sign in",
        Language.RU: "Пользователь с этим адресом уже зарегистрирован, пожалуйста, войдите",
        Language.HY: "Այս էլ. հասցեով գրանցված օգտատեր արդեն կա, խնդրում ենք մուտք գործել",
    },
    Message.VERIFICATION_CODE_SENT: {
        Language.EN: "Verification code is sent",
        Language.RU: "Код подтверждения отправлен",
        Language.HY: "Հաստատման կոդն ուղարկված է",
    },
    Message.EMAIL_VERIFIED: {
        Language.EN: "Email is verified",
        Language.RU: "Адрес электронной почты подтверждён",
        Language.HY: "Էլ. հասցեն հաստատված է",
    },
    Message.ORDER_NOT_FOUND: {
        Language.EN: "Order not found",
        Language.RU: "Заказ не найден",
        Language.HY: "Պատվերը չի գտնվել",
    },
    Message.ORDER_CREATED: {
        Language.EN: "Order is created",
        Language.RU: "Заказ создан",
        Language.HY: "Պատվերը ստեղծված է",
    },
    Message.ORDER_SET_TO_REVIEW: {
        Language.EN: "Order is sent to review",
        Language.RU: "Заказ отправлен на рассмотрение",
        Language.HY: "Պատվերն ուղարկված է վերանայման",
    },
    Message.ORDER_CANCELED: {
        Language.EN: "Order is canceled",
        Language.RU: "Заказ отменён",
        Language.HY: "Պատվերը չեղարկված է",
    },
    Message.ORDER_FINISHED: {
        Language.EN: "Order is finished",
        Language.RU: "Заказ завершён",
        Language.HY: "Պատվերն ավարտված է",
    },
    Message.TRANSITION_NOT_ALLOWED: {
        Language.EN: "This action is not allowed for the order in its current status",
        Language.RU: "Это действие недоступно для заказа в текущем статусе",
        Language.HY: "Այս գործողությունը թույլատրված չէ պատվերի ներկայիս կարգավիճակում",
    },
}


def translate(message: Message, language: Language = Language.EN, **params) -> str:
    """Render ``message`` in ``language``, substituting ``params`` into the template."""
    template = _CATALOGUE[message][language]
    return template.format(**params) if params else template
