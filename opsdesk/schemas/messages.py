"""
Localized validation messages.

Keys follow "<scope>.<field>.<rule>", "<field>.<rule>" or "*.<rule>", where
scope is the schema's message scope (its name unless overridden), field is
the dotted error location using API aliases and rule is one of:

    required, empty, min, max, pattern, only, type, min_fields, date_max

Catalogs are plain data. Deployments can override any key through the JSON
file named by VALIDATION_MESSAGES_FILE.
"""

from typing import Dict

PT_BR: Dict[str, str] = {
    # Generic fallbacks
    "*.required": "Campo obrigatório",
    "*.empty": "Campo obrigatório",
    "*.type": "Tipo de valor inválido",
    "*.only": "Valor não permitido",
    "*.pattern": "Formato inválido",
    "*.min_fields": "Pelo menos um campo deve ser fornecido para atualização",
    "body.type": "Corpo da requisição deve ser um objeto JSON válido",
    "query.type": "Parâmetros de consulta inválidos",
    "params.type": "Parâmetros da URL inválidos",

    # Users
    "name.required": "Nome é obrigatório",
    "name.empty": "Nome é obrigatório",
    "name.min": "Nome deve ter pelo menos 2 caracteres",
    "name.max": "Nome deve ter no máximo 100 caracteres",
    "email.required": "Email é obrigatório",
    "email.empty": "Email é obrigatório",
    "email.pattern": "Email deve ser válido",
    "password.required": "Senha é obrigatória",
    "password.empty": "Senha é obrigatória",
    "password.min": "Senha deve ter pelo menos 6 caracteres",
    "password.max": "Senha deve ter no máximo 128 caracteres",
    "password.pattern": "Senha deve conter pelo menos uma letra minúscula, uma maiúscula e um número",
    "role.only": "Role deve ser admin, user ou employee",
    "isActive.type": "isActive deve ser verdadeiro ou falso",
    "currentPassword.required": "Senha atual é obrigatória",
    "currentPassword.empty": "Senha atual é obrigatória",
    "newPassword.required": "Nova senha é obrigatória",
    "newPassword.empty": "Nova senha é obrigatória",
    "newPassword.min": "Nova senha deve ter pelo menos 6 caracteres",
    "newPassword.max": "Nova senha deve ter no máximo 128 caracteres",
    "newPassword.pattern": "Nova senha deve conter pelo menos uma letra minúscula, uma maiúscula e um número",

    # Equipment
    "equipment.name.required": "Nome do equipamento é obrigatório",
    "equipment.name.empty": "Nome do equipamento é obrigatório",
    "equipment.name.max": "Nome deve ter no máximo 200 caracteres",
    "category.required": "Categoria do equipamento é obrigatória",
    "category.only": "Categoria deve ser uma das opções válidas",
    "brand.required": "Marca do equipamento é obrigatória",
    "brand.empty": "Marca do equipamento é obrigatória",
    "brand.min": "Marca deve ter pelo menos 1 caractere",
    "brand.max": "Marca deve ter no máximo 100 caracteres",
    "model.required": "Modelo do equipamento é obrigatório",
    "model.empty": "Modelo do equipamento é obrigatório",
    "model.min": "Modelo deve ter pelo menos 1 caractere",
    "model.max": "Modelo deve ter no máximo 100 caracteres",
    "status.only": "Status deve ser: ativo, manutencao, inativo ou aposentado",
    "serialNumber.max": "Número de série deve ter no máximo 100 caracteres",
    "purchaseDate.type": "Data de compra deve ser uma data válida",
    "purchaseDate.date_max": "Data de compra não pode ser no futuro",
    "location.max": "Localização deve ter no máximo 200 caracteres",
    "notes.max": "Observações devem ter no máximo 1000 caracteres",
    "maintenance.preventiveInterval.min": "Intervalo de manutenção deve ser pelo menos 1 dia",
    "maintenance.preventiveInterval.max": "Intervalo de manutenção deve ser no máximo 365 dias",
    "maintenance.preventiveInterval.type": "Intervalo de manutenção deve ser um número de dias",
    "assignedTo.pattern": "ID do usuário deve ser um ObjectId válido",

    # Query / path parameters
    "id.required": "ID é obrigatório",
    "id.pattern": "ID deve ser um ObjectId válido",
    "page.type": "Página deve ser um número inteiro positivo",
    "page.min": "Página deve ser um número inteiro positivo",
    "limit.type": "Limite deve ser entre 1 e 100",
    "limit.min": "Limite deve ser entre 1 e 100",
    "limit.max": "Limite deve ser entre 1 e 100",
    "sort.max": "Campo de ordenação inválido",
    "order.only": "Ordem deve ser asc ou desc",
}

EN: Dict[str, str] = {
    "*.required": "Field is required",
    "*.empty": "Field is required",
    "*.type": "Invalid value type",
    "*.only": "Value is not allowed",
    "*.pattern": "Invalid format",
    "*.min_fields": "At least one field must be provided for update",
    "body.type": "Request body must be a valid JSON object",
    "query.type": "Invalid query parameters",
    "params.type": "Invalid path parameters",

    "name.required": "Name is required",
    "name.empty": "Name is required",
    "name.min": "Name must be at least 2 characters",
    "name.max": "Name must be at most 100 characters",
    "email.required": "Email is required",
    "email.empty": "Email is required",
    "email.pattern": "Email must be valid",
    "password.required": "Password is required",
    "password.empty": "Password is required",
    "password.min": "Password must be at least 6 characters",
    "password.max": "Password must be at most 128 characters",
    "password.pattern": "Password must contain at least one lowercase letter, one uppercase letter and one digit",
    "role.only": "Role must be admin, user or employee",
    "isActive.type": "isActive must be true or false",
    "currentPassword.required": "Current password is required",
    "currentPassword.empty": "Current password is required",
    "newPassword.required": "New password is required",
    "newPassword.empty": "New password is required",
    "newPassword.min": "New password must be at least 6 characters",
    "newPassword.max": "New password must be at most 128 characters",
    "newPassword.pattern": "New password must contain at least one lowercase letter, one uppercase letter and one digit",

    "equipment.name.required": "Equipment name is required",
    "equipment.name.empty": "Equipment name is required",
    "equipment.name.max": "Name must be at most 200 characters",
    "category.required": "Equipment category is required",
    "category.only": "Category must be one of the allowed options",
    "brand.required": "Equipment brand is required",
    "brand.empty": "Equipment brand is required",
    "brand.min": "Brand must be at least 1 character",
    "brand.max": "Brand must be at most 100 characters",
    "model.required": "Equipment model is required",
    "model.empty": "Equipment model is required",
    "model.min": "Model must be at least 1 character",
    "model.max": "Model must be at most 100 characters",
    "status.only": "Status must be one of: ativo, manutencao, inativo, aposentado",
    "serialNumber.max": "Serial number must be at most 100 characters",
    "purchaseDate.type": "Purchase date must be a valid date",
    "purchaseDate.date_max": "Purchase date cannot be in the future",
    "location.max": "Location must be at most 200 characters",
    "notes.max": "Notes must be at most 1000 characters",
    "maintenance.preventiveInterval.min": "Maintenance interval must be at least 1 day",
    "maintenance.preventiveInterval.max": "Maintenance interval must be at most 365 days",
    "maintenance.preventiveInterval.type": "Maintenance interval must be a number of days",
    "assignedTo.pattern": "User ID must be a valid ObjectId",

    "id.required": "ID is required",
    "id.pattern": "ID must be a valid ObjectId",
    "page.type": "Page must be a positive integer",
    "page.min": "Page must be a positive integer",
    "limit.type": "Limit must be between 1 and 100",
    "limit.min": "Limit must be between 1 and 100",
    "limit.max": "Limit must be between 1 and 100",
    "sort.max": "Invalid sort field",
    "order.only": "Order must be asc or desc",
}

DEFAULT_LOCALE = "pt-BR"

MESSAGE_CATALOGS: Dict[str, Dict[str, str]] = {
    "pt-BR": PT_BR,
    "en": EN,
}
